"""Classifies recipe blocks by the Zendesk resource kind they operate on."""

from recipe_linker.domain.enums import BlockKind
from recipe_linker.domain.recipe_blocks import ZendeskBlock

# Checked in order; the first substring found in the block name wins
_KIND_MARKERS: list[tuple[str, BlockKind]] = [
    ('ticket', BlockKind.TICKET),
    ('user', BlockKind.USER),
    ('organization', BlockKind.ORGANIZATION),
]

BlockKindTable = dict[str, BlockKind]


def classify_block(block: ZendeskBlock) -> BlockKind:
    """Return the resource kind named in the block's action identifier."""
    # TODO: match a specific list of action names instead of substrings
    for marker, kind in _KIND_MARKERS:
        if marker in block.name:
            return kind
    return BlockKind.OTHER


class BlockClassifier:
    """Classifies the blocks of one recipe and records them by alias.

    Args:
        block_kinds: The recipe's table, filled in place.
    """

    def __init__(self, block_kinds: BlockKindTable | None = None) -> None:
        self.block_kinds: BlockKindTable = block_kinds if block_kinds is not None else {}

    def classify(self, block: ZendeskBlock) -> BlockKind:
        kind = classify_block(block)
        self.block_kinds[block.as_] = kind
        return kind
