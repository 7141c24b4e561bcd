# Wire-type codes as they appear in the low 3 bits of a tag.
WIRE_TYPE_VARINT = 0
WIRE_TYPE_LENGTH_DELIMITED = 2
WIRE_TYPE_FIXED32 = 5

TAG_TYPE_BITS = 3
TAG_TYPE_MASK = 0x07

# Varints are capped at 7 groups (49 bits) by default. The standard protobuf
# cap of 10 groups is the most we ever accept.
DEFAULT_MAX_VARINT_GROUPS = 7
MAX_VARINT_GROUPS_LIMIT = 10
# Decoded varints must fit in an unsigned 64-bit integer.
VARINT_VALUE_LIMIT = 1 << 64

# Nesting guard for decode_nested(); matches the python-protobuf recursion limit.
DEFAULT_MAX_DEPTH = 100

FIXED32_SIZE = 4

CONF_MAX_VARINT_GROUPS = "max_varint_groups"
CONF_MAX_DEPTH = "max_depth"
CONF_FIXED32_VIA_VARINT = "fixed32_via_varint"
