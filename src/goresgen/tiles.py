# src/goresgen/tiles.py
# Canonical block types for generated maps.

from enum import IntEnum


class BlockType(IntEnum):
    # SOLID is the zero value so a freshly allocated grid is all rock.
    SOLID = 0
    EMPTY = 1
    HOOKABLE = 2
    UNHOOKABLE = 3
    FREEZE = 4
    PLATFORM = 5
    DEBUG = 6


# Cells the platform search must keep out of its safety rectangle.
PLATFORM_BLOCKERS = (BlockType.HOOKABLE, BlockType.FREEZE)

