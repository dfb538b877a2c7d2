"""
Shared test constants
"""

# Values of the ElementType enum used throughout the tests
ELEMENT_TYPE_VALUES = ["COLLECTION", "MOVIE", "SERIAL"]
