# config.py

# Spatial index padding (degrees) applied around segment envelopes when
# looking for adjacent fragments of the same street.
RTREE_PADDING = 0.001

# Administrative levels extracted when none are requested explicitly
DEFAULT_ADMIN_LEVELS = [4, 6, 8, 9, 10]
MAX_ADMIN_LEVEL = 255

# highway=* values considered streets (each combined with a name tag)
STREET_HIGHWAY_VALUES = [
    "primary",
    "secondary",
    "tertiary",
    "residential",
    "service",
    "living_street",
    "pedestrian",
]

# Relation member roles that contribute to boundary rings
OUTER_ROLES = {"outer", ""}
INNER_ROLES = {"inner"}

# Merged roads have no OSM id of their own
ROAD_ID_OFFSET = 420_000_000

# Worker threads for per-name street clustering (None -> executor default)
MAX_WORKERS = None

# OVERPASS API configuration (used when no PBF file is given)
OVERPASS_TIMEOUT = 180
OVERPASS_MAX_RETRIES = 3
OVERPASS_RETRY_DELAY = 5.0

# Recursive-down step so that dependencies come back with the matches
OVERPASS_QUERY = """
(
{clauses}
);
(._;>>;);
""".strip()

