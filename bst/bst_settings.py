"""
Defaults shared by the engine, the playback controller and the layout pass.
"""
# Maximum number of nodes a tree may hold. An insert into a full tree records
# a single informational step and leaves the tree untouched. Every step stores
# a full copy of the tree, so this also bounds the memory used by one trace.
DEFAULT_MAX_NODES = 256

# How an insert of a key that is already present is handled. One of
# "reject", "allow-left", "allow-right" or "multiset".
DEFAULT_DUPLICATE_POLICY = "reject"

# Base time, in milliseconds, between two steps during automatic playback.
# The effective interval is divided by the global speed multiplier.
BASE_STEP_MS = 900

# Bounds of the playback speed multiplier.
MIN_SPEED = 0.25
MAX_SPEED = 3.0

# Layout spacing. H_GAP is the minimum horizontal distance between sibling
# subtrees, V_GAP the distance between two levels. A node with a single child
# offsets it by SINGLE_CHILD_OFFSET so the edge never runs vertically.
NODE_WIDTH = 56
H_GAP = 90
V_GAP = 130
SINGLE_CHILD_OFFSET = 60
