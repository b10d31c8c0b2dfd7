#!/usr/bin/env python3

"""dpxtools_layout.py module description.

DPX image element descriptors ("description codes").

The descriptor byte of an image element selects the channel layout of the
element: how many components each pixel has, and what they mean.
"""


import enum
import types

import dpxtools_common


class ComponentType(enum.Enum):
    user_defined = "User-defined"
    red = "Red"
    green = "Green"
    blue = "Blue"
    alpha = "Alpha"
    luminance = "Luminance"
    chrominance = "Chrominance"
    depth = "Depth"
    composite_video = "Composite video"
    rgb = "RGB"
    rgba = "RGBA"
    abgr = "ABGR"
    cbycry = "CbYCrY"
    cbyacrya = "CbYaCrYa"
    cbycr = "CbYCr"
    cbycra = "CbYCra"
    user_defined_2 = "User-defined 2-component element"
    user_defined_3 = "User-defined 3-component element"
    user_defined_4 = "User-defined 4-component element"
    user_defined_5 = "User-defined 5-component element"
    user_defined_6 = "User-defined 6-component element"
    user_defined_7 = "User-defined 7-component element"
    user_defined_8 = "User-defined 8-component element"

    def __str__(self):
        return self.value


# description code -> element layout
# * clen: components per pixel
# * type: component semantics
_DESCRIPTION_FORMATS = {
    # single-component elements
    0: {"clen": 1, "type": ComponentType.user_defined},
    1: {"clen": 1, "type": ComponentType.red},
    2: {"clen": 1, "type": ComponentType.green},
    3: {"clen": 1, "type": ComponentType.blue},
    4: {"clen": 1, "type": ComponentType.alpha},
    5: {"clen": 1, "type": ComponentType.luminance},
    6: {"clen": 1, "type": ComponentType.chrominance},
    7: {"clen": 1, "type": ComponentType.depth},
    8: {"clen": 1, "type": ComponentType.composite_video},
    # RGB elements
    50: {"clen": 3, "type": ComponentType.rgb},
    51: {"clen": 4, "type": ComponentType.rgba},
    52: {"clen": 4, "type": ComponentType.abgr},
    # YCbCr elements
    100: {"clen": 3, "type": ComponentType.cbycry},
    101: {"clen": 4, "type": ComponentType.cbyacrya},
    102: {"clen": 3, "type": ComponentType.cbycr},
    103: {"clen": 3, "type": ComponentType.cbycra},
    # user-defined multi-component elements
    150: {"clen": 2, "type": ComponentType.user_defined_2},
    151: {"clen": 3, "type": ComponentType.user_defined_3},
    152: {"clen": 4, "type": ComponentType.user_defined_4},
    153: {"clen": 5, "type": ComponentType.user_defined_5},
    154: {"clen": 6, "type": ComponentType.user_defined_6},
    155: {"clen": 7, "type": ComponentType.user_defined_7},
    156: {"clen": 8, "type": ComponentType.user_defined_8},
}

# read-only views
DESCRIPTION_FORMATS = types.MappingProxyType(
    {code: types.MappingProxyType(val) for code, val in _DESCRIPTION_FORMATS.items()}
)

NUM_COMPONENTS = types.MappingProxyType(
    {code: val["clen"] for code, val in DESCRIPTION_FORMATS.items()}
)
COMPONENT_TYPES = types.MappingProxyType(
    {code: val["type"] for code, val in DESCRIPTION_FORMATS.items()}
)

DESCRIPTION_LIST = list(DESCRIPTION_FORMATS.keys())


def get_num_components(description):
    if description not in NUM_COMPONENTS:
        raise dpxtools_common.UnknownDescriptionCodeException(description)
    return NUM_COMPONENTS[description]


def get_component_type(description):
    if description not in COMPONENT_TYPES:
        raise dpxtools_common.UnknownDescriptionCodeException(description)
    return COMPONENT_TYPES[description]
