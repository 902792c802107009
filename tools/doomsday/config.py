"""Constants and configuration."""

DOOMSDAY_CONTRACT = "0xd6e382aa7A09fc4A09C2fb99Cfce6A429985E65d"
DAO_ADDRESS = "0x7bb7bd0e8923b1f698eeaf0ab49834b8f1810d58"

# Map geometry (map units). The map wraps east-west only.
MAP_WIDTH = 4320000
MAP_HEIGHT = 2588795

# Smallest blast radius, about 8% of map height
BASE_BLAST_RADIUS = 100000

# Block hash is reduced by this before the impact is derived
SEED_MODULUS = 2 ** 255 - 1

# Stored impact fingerprints are compared modulo this
FINGERPRINT_MODULUS = 2 ** 240 - 1

# Packed widths of the impact fingerprint (bytes)
FINGERPRINT_COORD_BYTES = 32  # int64[] elements pad to a full word
FINGERPRINT_RADIUS_BYTES = 8  # int64

# Impacts are seeded by a block hash every IMPACT_BLOCK_INTERVAL blocks,
# taken ELIMINATION_BLOCK_OFFSET blocks before the interval boundary.
IMPACT_BLOCK_INTERVAL = 120
ELIMINATION_BLOCK_OFFSET = 5

# Move tags
HIT = "hit"
EVACUATE = "evacuate"
TRANSFER = "transfer"
MOVES = (HIT, EVACUATE, TRANSFER)

# Contract entrypoints per move
ENTRYPOINTS = {
    HIT: "confirmHit",
    EVACUATE: "evacuate",
    TRANSFER: "transferFrom",
}
