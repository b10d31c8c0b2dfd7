#!/usr/bin/env python3

"""dpxtools_layout_unittest.py: dpxtools_layout unittest.

# runme
# $ ./dpxtools_layout_unittest.py
"""

import sys

import dpxtools_common
import dpxtools_layout
import dpxtools_unittest


descriptionTestCases = [
    {
        "name": "user-defined",
        "description": 0,
        "num_components": 1,
        "component_type": dpxtools_layout.ComponentType.user_defined,
    },
    {
        "name": "luminance",
        "description": 5,
        "num_components": 1,
        "component_type": dpxtools_layout.ComponentType.luminance,
    },
    {
        "name": "composite-video",
        "description": 8,
        "num_components": 1,
        "component_type": dpxtools_layout.ComponentType.composite_video,
    },
    {
        "name": "rgb",
        "description": 50,
        "num_components": 3,
        "component_type": dpxtools_layout.ComponentType.rgb,
    },
    {
        "name": "rgba",
        "description": 51,
        "num_components": 4,
        "component_type": dpxtools_layout.ComponentType.rgba,
    },
    {
        "name": "abgr",
        "description": 52,
        "num_components": 4,
        "component_type": dpxtools_layout.ComponentType.abgr,
    },
    {
        "name": "cbycry",
        "description": 100,
        "num_components": 3,
        "component_type": dpxtools_layout.ComponentType.cbycry,
    },
    {
        "name": "cbyacrya",
        "description": 101,
        "num_components": 4,
        "component_type": dpxtools_layout.ComponentType.cbyacrya,
    },
    {
        "name": "cbycra",
        "description": 103,
        "num_components": 3,
        "component_type": dpxtools_layout.ComponentType.cbycra,
    },
    {
        "name": "user-defined-2",
        "description": 150,
        "num_components": 2,
        "component_type": dpxtools_layout.ComponentType.user_defined_2,
    },
    {
        "name": "user-defined-8",
        "description": 156,
        "num_components": 8,
        "component_type": dpxtools_layout.ComponentType.user_defined_8,
    },
]

unknownDescriptionTestCases = [
    {"name": "gap-low", "description": 9},
    {"name": "gap-rgb", "description": 53},
    {"name": "gap-ycbcr", "description": 104},
    {"name": "past-end", "description": 157},
    {"name": "max-byte", "description": 255},
]


class MainTest(dpxtools_unittest.TestCase):
    def testGetNumComponents(self):
        """get_num_components test."""
        function_name = "testGetNumComponents"
        for test_case in self.getTestCases(function_name, descriptionTestCases):
            print(f"...running \"{function_name}.{test_case['name']}\"")
            num_components = dpxtools_layout.get_num_components(
                test_case["description"]
            )
            self.assertEqual(
                test_case["num_components"],
                num_components,
                f"error on {test_case['name']} case",
            )

    def testGetComponentType(self):
        """get_component_type test."""
        function_name = "testGetComponentType"
        for test_case in self.getTestCases(function_name, descriptionTestCases):
            print(f"...running \"{function_name}.{test_case['name']}\"")
            component_type = dpxtools_layout.get_component_type(
                test_case["description"]
            )
            self.assertEqual(
                test_case["component_type"],
                component_type,
                f"error on {test_case['name']} case",
            )

    def testUnknownDescription(self):
        """unknown description code test."""
        function_name = "testUnknownDescription"
        for test_case in self.getTestCases(function_name, unknownDescriptionTestCases):
            print(f"...running \"{function_name}.{test_case['name']}\"")
            description = test_case["description"]
            with self.assertRaises(
                dpxtools_common.UnknownDescriptionCodeException
            ) as cm:
                dpxtools_layout.get_num_components(description)
            self.assertEqual(description, cm.exception.description)
            with self.assertRaises(dpxtools_common.UnknownDescriptionCodeException):
                dpxtools_layout.get_component_type(description)

    def testTablesAreReadOnly(self):
        """layout tables cannot be modified."""
        with self.assertRaises(TypeError):
            dpxtools_layout.NUM_COMPONENTS[50] = 4
        with self.assertRaises(TypeError):
            dpxtools_layout.COMPONENT_TYPES[9] = dpxtools_layout.ComponentType.rgb
        with self.assertRaises(TypeError):
            dpxtools_layout.DESCRIPTION_FORMATS[50]["clen"] = 4
        self.assertEqual(3, dpxtools_layout.get_num_components(50))

    def testTablesAreConsistent(self):
        """every description code has both a count and a type."""
        self.assertEqual(
            set(dpxtools_layout.NUM_COMPONENTS.keys()),
            set(dpxtools_layout.COMPONENT_TYPES.keys()),
        )
        self.assertEqual(23, len(dpxtools_layout.DESCRIPTION_LIST))

    def testComponentTypeStr(self):
        """component type display names."""
        self.assertEqual("RGBA", str(dpxtools_layout.ComponentType.rgba))
        self.assertEqual(
            "User-defined 3-component element",
            str(dpxtools_layout.get_component_type(151)),
        )


if __name__ == "__main__":
    dpxtools_unittest.main(sys.argv)
