"""
Map free-text locations to LinkedIn geo URN ids for the people search.

This is a lookup table, not a geocoder. Unknown places fall back to the
United States.
"""

import re

DEFAULT_GEO_CODE = "103644278"

# Keys this short only match as whole words inside the input.
SHORT_KEY_LENGTH = 3
# Inputs shorter than this never match as a fragment of a longer key.
MIN_PARTIAL_LENGTH = 3

# Insertion order matters: it breaks ties between equally long substring
# matches, so broader and more commonly meant places come first.
LOCATION_CODES = {
    'united states': '103644278', 'usa': '103644278', 'us': '103644278',
    'california': '102593603', 'new york': '100630339', 'texas': '103980366',
    'florida': '104035573', 'illinois': '102319083', 'pennsylvania': '102748354',
    'ohio': '103232215', 'georgia': '104766914', 'north carolina': '103973543',
    'michigan': '101748185', 'new jersey': '104034105', 'virginia': '103236371',
    'washington': '104079105', 'arizona': '102966764', 'massachusetts': '100567043',
    'tennessee': '100446193', 'indiana': '100428013', 'missouri': '100443995',
    'maryland': '103236371', 'wisconsin': '104079105', 'colorado': '103112571',
    'minnesota': '101748185', 'south carolina': '103973543', 'alabama': '104766914',
    'louisiana': '104035573', 'kentucky': '100446193', 'oregon': '104079105',
    'oklahoma': '103980366', 'connecticut': '100630339', 'iowa': '100428013',
    'utah': '103112571', 'nevada': '102966764', 'arkansas': '104035573',
    'mississippi': '104766914', 'kansas': '100443995', 'new mexico': '102966764',
    'nebraska': '100428013', 'west virginia': '103236371', 'idaho': '104079105',
    'hawaii': '102593603', 'new hampshire': '100567043', 'maine': '100567043',
    'montana': '104079105', 'rhode island': '100630339', 'delaware': '104034105',
    'south dakota': '100428013', 'north dakota': '100428013', 'alaska': '102593603',
    'vermont': '100567043', 'wyoming': '104079105',
    'new york city': '90000070', 'los angeles': '90000068', 'chicago': '90000049',
    'houston': '90000059', 'phoenix': '90000084', 'philadelphia': '90000082',
    'san antonio': '90000089', 'san diego': '90000090', 'dallas': '90000052',
    'san jose': '90000091', 'austin': '90000042', 'jacksonville': '90000061',
    'fort worth': '90000056', 'columbus': '90000050', 'charlotte': '90000047',
    'san francisco': '90000088', 'indianapolis': '90000060', 'seattle': '90000095',
    'denver': '90000053', 'washington dc': '90000098', 'boston': '90000045',
    'canada': '101174742', 'uk': '101165590', 'united kingdom': '101165590',
    'india': '102713980', 'australia': '101452733', 'germany': '101282230',
    'france': '105015875', 'brazil': '106057199', 'italy': '103350119',
    'spain': '105646813', 'netherlands': '102890719', 'switzerland': '106693272',
    'london': '102257872', 'toronto': '100025096', 'sydney': '101452733',
    'melbourne': '101452733', 'vancouver': '100025096', 'montreal': '100025096',
    'berlin': '101282230', 'paris': '105015875', 'amsterdam': '102890719',
    'rome': '103350119', 'madrid': '105646813', 'barcelona': '105646813',
    'dublin': '104738515', 'mumbai': '102713980', 'delhi': '102713980',
    'bangalore': '102713980', 'tokyo': '101355337', 'singapore': '102454443',
    'dubai': '104305776',
}


def resolve(location: str) -> str:
    """Resolve a location string to a geo code.

    Exact matches win. Otherwise any key that contains, or is contained in,
    the input is a candidate and the longest overlap wins, so
    "greater new york city area" picks "new york city" rather than "new york"
    and "atlanta, georgia" picks "georgia". Ties keep table order.

    Args:
        location: Free-text location, e.g. "San Francisco Bay Area"

    Returns:
        Geo code string; DEFAULT_GEO_CODE when nothing matches.
    """
    normalized = (location or "").lower().strip()
    if not normalized:
        return DEFAULT_GEO_CODE

    if normalized in LOCATION_CODES:
        return LOCATION_CODES[normalized]

    best_code = None
    best_overlap = 0
    for key, code in LOCATION_CODES.items():
        if _contains(normalized, key):
            overlap = len(key)
        elif len(normalized) >= MIN_PARTIAL_LENGTH and normalized in key:
            overlap = len(normalized)
        else:
            continue
        if overlap > best_overlap:
            best_code = code
            best_overlap = overlap

    return best_code or DEFAULT_GEO_CODE


def _contains(text: str, key: str) -> bool:
    # "us" and "uk" would otherwise hit "austin", "houston", "fukuoka"...
    if len(key) <= SHORT_KEY_LENGTH:
        return re.search(rf"\b{re.escape(key)}\b", text) is not None
    return key in text
