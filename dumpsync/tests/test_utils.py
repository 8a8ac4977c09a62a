from math import ceil
from unittest import TestCase

from dumpsync.utils import chunked, human_duration


class ChunkedTestCase(TestCase):
    def test_chunk_sizes(self):
        for length in (0, 1, 998, 999, 1000, 1998, 2500):
            sequence = ['key-{}'.format(i) for i in range(length)]
            chunks = chunked(sequence, 999)

            self.assertEqual(len(chunks), ceil(length / 999), length)
            for chunk in chunks[:-1]:
                self.assertEqual(len(chunk), 999)
            if chunks:
                self.assertTrue(1 <= len(chunks[-1]) <= 999)
            # Concatenating the chunks gives back the sequence.
            self.assertEqual(
                [i for chunk in chunks for i in chunk], sequence)

    def test_small(self):
        self.assertEqual(chunked([1, 2, 3, 4, 5], 2), [[1, 2], [3, 4], [5]])
        self.assertEqual(chunked(iter('abc'), 5), [['a', 'b', 'c']])
        self.assertEqual(chunked([], 3), [])

    def test_bad_size(self):
        with self.assertRaises(ValueError):
            chunked([1], 0)


class HumanDurationTestCase(TestCase):
    def test_human_duration(self):
        self.assertEqual(human_duration(0.4), '0s')
        self.assertEqual(human_duration(59), '59s')
        self.assertEqual(human_duration(1234.5), '20m34s')
        self.assertEqual(human_duration(7260), '2h01m')
