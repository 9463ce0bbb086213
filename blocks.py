from collections import namedtuple

# A block is a base blockstate with an optional extra (waterlogged) layer.
Block = namedtuple('Block', 'base extra')
Block.__new__.__defaults__ = (None,)


GRAY_CONCRETE = Block('minecraft:gray_concrete')
BEDROCK = Block('minecraft:bedrock')
GRAVEL = Block('minecraft:gravel')
DEEPSLATE = Block('minecraft:deepslate')
WATER = Block('minecraft:water')
SEAGRASS_SHORT = Block('minecraft:seagrass', 'minecraft:water')
SEAGRASS_TALL_LOWER = Block('minecraft:tall_seagrass[half=lower]', 'minecraft:water')
SEAGRASS_TALL_UPPER = Block('minecraft:tall_seagrass[half=upper]', 'minecraft:water')
