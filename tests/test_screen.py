import curses
import unittest
from unittest.mock import MagicMock, patch

from pick_pad.screen import CursesScreen, MemoryScreen, ScreenError
from pick_pad.style import (
    ATTR_BOLD,
    ATTR_REVERSE,
    ATTR_UNDERLINE,
    COLOR_BLUE,
    COLOR_DEFAULT,
    COLOR_RED,
    COLOR_WHITE,
)


class TestMemoryScreen(unittest.TestCase):

    def test_wide_glyph_marks_continuation_cell(self):
        screen = MemoryScreen(4, 1)
        screen.set_cell(0, 0, "日", COLOR_RED, COLOR_BLUE)
        self.assertEqual(screen.cell(0, 0), ("日", COLOR_RED, COLOR_BLUE))
        self.assertEqual(screen.cell(1, 0), ("", COLOR_RED, COLOR_BLUE))
        self.assertEqual(screen.row_text(0), "日  ")

    def test_out_of_bounds_writes_are_ignored(self):
        screen = MemoryScreen(3, 2)
        screen.set_cell(3, 0, "x", 0, 0)
        screen.set_cell(0, -1, "x", 0, 0)
        self.assertEqual(screen.cells, {})

    def test_clear_uses_given_colours(self):
        screen = MemoryScreen(3, 1)
        screen.set_cell(0, 0, "x", 0, 0)
        screen.clear(COLOR_WHITE, COLOR_BLUE)
        self.assertEqual(screen.row_cells(0), [(" ", COLOR_WHITE, COLOR_BLUE)] * 3)

    def test_resize_drops_cells_outside(self):
        screen = MemoryScreen(5, 5)
        screen.set_cell(4, 4, "z", 0, 0)
        screen.set_cell(1, 1, "a", 0, 0)
        screen.resize(3, 3)
        self.assertEqual(screen.size(), (3, 3))
        self.assertEqual(list(screen.cells), [(1, 1)])

    def test_failures_raise(self):
        screen = MemoryScreen()
        screen.fail_clear = True
        screen.fail_flush = True
        with self.assertRaises(ScreenError):
            screen.clear(0, 0)
        with self.assertRaises(ScreenError):
            screen.flush()


@patch('curses.color_pair', side_effect=lambda n: n << 8)
@patch('curses.init_pair')
@patch('curses.use_default_colors')
@patch('curses.start_color')
@patch('curses.has_colors', return_value=True)
class TestCursesScreen(unittest.TestCase):

    def setUp(self):
        self.stdscr_mock = MagicMock()
        self.stdscr_mock.getmaxyx.return_value = (24, 80)

    def test_size_is_width_then_height(self, *_mocks):
        screen = CursesScreen(self.stdscr_mock)
        self.assertEqual(screen.size(), (80, 24))

    def test_pairs_are_allocated_once(self, mock_has_colors, mock_start, mock_default, mock_init_pair, mock_pair):
        screen = CursesScreen(self.stdscr_mock)
        self.assertTrue(screen.has_colors)
        mock_start.assert_called_once()
        mock_default.assert_called_once()

        first = screen.attribute_for(COLOR_RED, COLOR_BLUE)
        again = screen.attribute_for(COLOR_RED | ATTR_BOLD, COLOR_BLUE)
        mock_init_pair.assert_called_once_with(1, curses.COLOR_RED, curses.COLOR_BLUE)
        self.assertEqual(first, 1 << 8)
        self.assertEqual(again, (1 << 8) | curses.A_BOLD)

        screen.attribute_for(COLOR_WHITE, COLOR_DEFAULT)
        mock_init_pair.assert_called_with(2, curses.COLOR_WHITE, -1)

    def test_default_colours_use_pair_zero(self, mock_has_colors, mock_start, mock_default, mock_init_pair, mock_pair):
        screen = CursesScreen(self.stdscr_mock)
        attr = screen.attribute_for(COLOR_DEFAULT | ATTR_UNDERLINE, COLOR_DEFAULT | ATTR_REVERSE)
        self.assertEqual(attr, curses.A_UNDERLINE | curses.A_REVERSE)
        mock_init_pair.assert_not_called()

    def test_no_colour_terminal_keeps_modifiers(self, mock_has_colors, mock_start, mock_default, mock_init_pair,
                                                mock_pair):
        mock_has_colors.return_value = False
        screen = CursesScreen(self.stdscr_mock)
        self.assertFalse(screen.has_colors)
        self.assertEqual(screen.attribute_for(COLOR_RED | ATTR_BOLD, COLOR_BLUE), curses.A_BOLD)
        mock_start.assert_not_called()

    def test_failed_init_pair_falls_back(self, mock_has_colors, mock_start, mock_default, mock_init_pair, mock_pair):
        mock_init_pair.side_effect = curses.error("no pair")
        screen = CursesScreen(self.stdscr_mock)
        self.assertEqual(screen.attribute_for(COLOR_RED, COLOR_BLUE), 0)

    def test_set_cell_swallows_curses_errors(self, *_mocks):
        screen = CursesScreen(self.stdscr_mock)
        self.stdscr_mock.addstr.side_effect = curses.error("bottom-right")
        screen.set_cell(79, 23, "x", COLOR_DEFAULT, COLOR_DEFAULT)
        self.stdscr_mock.addstr.assert_called_once_with(23, 79, "x", 0)

    def test_clear_and_flush(self, *_mocks):
        screen = CursesScreen(self.stdscr_mock)
        screen.clear(COLOR_DEFAULT, COLOR_DEFAULT)
        self.stdscr_mock.bkgdset.assert_called_once_with(" ", 0)
        self.stdscr_mock.erase.assert_called_once()

        with patch('curses.doupdate') as mock_doupdate:
            screen.flush()
            self.stdscr_mock.noutrefresh.assert_called_once()
            mock_doupdate.assert_called_once()

    def test_device_errors_become_screen_errors(self, *_mocks):
        screen = CursesScreen(self.stdscr_mock)
        self.stdscr_mock.erase.side_effect = curses.error("erase")
        with self.assertRaises(ScreenError):
            screen.clear(COLOR_DEFAULT, COLOR_DEFAULT)

        with patch('curses.doupdate', side_effect=curses.error("doupdate")):
            with self.assertRaises(ScreenError):
                screen.flush()


if __name__ == '__main__':
    unittest.main()
