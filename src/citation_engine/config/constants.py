"""Static tables shared by the resolver, normalizer and placement engine."""

# Hosts that wrap a base64url token in a path segment after a fixed marker.
AGGREGATOR_HOSTS = frozenset({"vertexaisearch.cloud.google.com"})
AGGREGATOR_PATH_MARKER = "grounding-api-redirect"

# Custom URL schemes used by grounding providers for indirection links.
REDIRECT_SCHEME_PREFIXES = ("grounding", "vertex", "genai")

# Exact hosts and suffixes classified as redirect/aggregator hosts.
REDIRECT_HOSTS = frozenset({"google.com", "vertexaisearch.cloud.google.com"})
REDIRECT_HOST_SUFFIXES = (".google.com", ".googleusercontent.com")

# Search-engine redirect paths on hosts that are not themselves redirect hosts.
SEARCH_REDIRECT_PATHS = {
    "duckduckgo.com": ("/l/", "/l"),
}

# Query parameters that may carry the destination, in priority order.
DESTINATION_PARAMS = (
    "url",
    "q",
    "u",
    "target",
    "dest",
    "destination",
    "redirect",
    "redirect_uri",
    "uddg",
)

SOURCE_PLACEHOLDER = "Source"

SITE_NAMES = {
    "youtube.com": "YouTube",
    "facebook.com": "Facebook",
    "twitter.com": "Twitter",
    "x.com": "X",
    "linkedin.com": "LinkedIn",
    "github.com": "GitHub",
    "stackoverflow.com": "Stack Overflow",
    "medium.com": "Medium",
    "reddit.com": "Reddit",
    "wikipedia.org": "Wikipedia",
    "en.wikipedia.org": "Wikipedia",
    "amazon.com": "Amazon",
    "nytimes.com": "The New York Times",
    "bbc.com": "BBC",
    "bbc.co.uk": "BBC",
    "who.int": "WHO",
    "nih.gov": "NIH",
    "cdc.gov": "CDC",
    "mayoclinic.org": "Mayo Clinic",
    "webmd.com": "WebMD",
}

# Cache namespaces
DECODED_NAMESPACE = "decoded"
META_NAMESPACE = "meta"

# Page metadata limits
META_TITLE_MAX_CHARS = 100
META_DESCRIPTION_MAX_CHARS = 200
