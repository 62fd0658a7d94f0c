import unittest

from pick_pad.render import byte_offsets, char_width, decode_text, merge_attribute, print_screen, string_width
from pick_pad.screen import MemoryScreen
from pick_pad.style import (
    ATTR_BOLD,
    ATTR_REVERSE,
    ATTR_UNDERLINE,
    COLOR_BLACK,
    COLOR_BLUE,
    COLOR_DEFAULT,
    COLOR_MASK,
    COLOR_RED,
    COLOR_WHITE,
)


class TestWidths(unittest.TestCase):

    def test_ascii_and_wide_glyphs(self):
        self.assertEqual(char_width("a"), 1)
        self.assertEqual(char_width("日"), 2)
        self.assertEqual(string_width("a日b"), 4)

    def test_zero_width_characters(self):
        self.assertEqual(char_width("\u0301"), 0)  # combining acute accent
        self.assertEqual(char_width("\x07"), 0)

    def test_decode_replaces_each_invalid_byte(self):
        self.assertEqual(decode_text(b"a\xff\xfeb"), "a??b")
        self.assertEqual(decode_text("café".encode("utf-8")), "café")
        self.assertEqual(decode_text("plain"), "plain")

    def test_byte_offsets_of_each_character(self):
        self.assertEqual(byte_offsets("aé日".encode("utf-8")), [0, 1, 3, 6])
        self.assertEqual(byte_offsets(b"a\xff\xfeb"), [0, 1, 2, 3, 4])
        self.assertEqual(byte_offsets(b""), [0])


class TestMergeAttribute(unittest.TestCase):

    def test_passes_through_when_one_side_has_no_colour(self):
        self.assertEqual(merge_attribute(COLOR_DEFAULT | ATTR_BOLD, COLOR_RED), COLOR_RED | ATTR_BOLD)
        self.assertEqual(merge_attribute(COLOR_BLUE, COLOR_DEFAULT), COLOR_BLUE)

    def test_overlays_colour_and_keeps_modifiers(self):
        merged = merge_attribute(COLOR_RED | ATTR_BOLD, COLOR_BLUE | ATTR_UNDERLINE)
        self.assertTrue(merged & ATTR_BOLD)
        self.assertTrue(merged & ATTR_UNDERLINE)
        self.assertFalse(merged & ATTR_REVERSE)
        self.assertEqual(merged & COLOR_MASK, ((COLOR_RED - 1) | (COLOR_BLUE - 1)) + 1)


class TestPrintScreen(unittest.TestCase):

    def setUp(self):
        self.screen = MemoryScreen(10, 2)

    def test_columns_advance_by_display_width(self):
        end = print_screen(self.screen, 0, 0, COLOR_WHITE, COLOR_BLACK, "日本a")
        self.assertEqual(end, 5)
        self.assertEqual(self.screen.cell(0, 0)[0], "日")
        self.assertEqual(self.screen.cell(2, 0)[0], "本")
        self.assertEqual(self.screen.cell(4, 0), ("a", COLOR_WHITE, COLOR_BLACK))

    def test_invalid_bytes_are_drawn_as_placeholder(self):
        print_screen(self.screen, 1, 1, COLOR_WHITE, COLOR_BLACK, b"a\xffb")
        self.assertEqual(self.screen.row_text(1)[:4], " a?b")

    def test_fill_paints_to_right_edge(self):
        print_screen(self.screen, 3, 0, COLOR_RED, COLOR_BLUE, "ab", fill=True)
        for x in range(5, 10):
            self.assertEqual(self.screen.cell(x, 0), (" ", COLOR_RED, COLOR_BLUE))
        self.assertEqual(self.screen.cell(2, 0), (" ", COLOR_DEFAULT, COLOR_DEFAULT))

    def test_without_fill_leaves_rest_of_row(self):
        print_screen(self.screen, 0, 0, COLOR_RED, COLOR_BLUE, "ab")
        self.assertEqual(self.screen.cell(2, 0), (" ", COLOR_DEFAULT, COLOR_DEFAULT))


if __name__ == '__main__':
    unittest.main()
