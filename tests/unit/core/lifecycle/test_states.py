#!/usr/bin/env python3
"""
Unit tests for funnel states and the notes log format.
"""

import unittest
from datetime import datetime, timezone

from core.exceptions import ValidationError
from core.lifecycle import MatchStatus, SIMPLIFIED_FUNNEL, is_terminal, append_note
from core.lifecycle.states import timestamp_field


class TestMatchStatus(unittest.TestCase):

    def test_parse(self):
        self.assertIs(MatchStatus.parse('presented'), MatchStatus.PRESENTED)
        self.assertIs(MatchStatus.parse(' Contracted '), MatchStatus.CONTRACTED)
        self.assertIs(MatchStatus.parse(MatchStatus.EXPIRED), MatchStatus.EXPIRED)

    def test_parse_unknown(self):
        with self.assertRaises(ValidationError):
            MatchStatus.parse('archived')

    def test_terminal_states(self):
        self.assertTrue(is_terminal('contracted'))
        self.assertTrue(is_terminal('expired'))
        self.assertFalse(is_terminal('rejected'))
        self.assertFalse(is_terminal('garbage'))

    def test_simplified_funnel_is_a_subset(self):
        self.assertEqual(SIMPLIFIED_FUNNEL[0], MatchStatus.MATCHED)
        self.assertEqual(SIMPLIFIED_FUNNEL[-1], MatchStatus.CONTRACTED)
        self.assertTrue(set(SIMPLIFIED_FUNNEL) <= set(MatchStatus))

    def test_timestamp_fields(self):
        self.assertEqual(timestamp_field(MatchStatus.REVIEWED), 'reviewed_at')
        self.assertEqual(timestamp_field(MatchStatus.PRESENTED), 'presented_at')
        for status in ('interested', 'not_interested', 'rejected', 'contracted'):
            self.assertEqual(timestamp_field(MatchStatus(status)), 'responded_at')
        self.assertIsNone(timestamp_field(MatchStatus.MATCHED))
        self.assertIsNone(timestamp_field(MatchStatus.EXPIRED))


class TestNotes(unittest.TestCase):

    def test_first_note(self):
        now = datetime(2024, 6, 1, 9, 5, tzinfo=timezone.utc)
        self.assertEqual(append_note(None, 'called buyer', now), '[2024-06-01 09:05] called buyer')

    def test_append_keeps_history(self):
        now = datetime(2024, 6, 2, 14, 0, tzinfo=timezone.utc)
        notes = append_note('[2024-06-01 09:05] called buyer', 'sent floor plan', now)
        self.assertEqual(notes, '[2024-06-01 09:05] called buyer\n[2024-06-02 14:00] sent floor plan')


if __name__ == "__main__":
    unittest.main()
