import json
import unittest

from lumina.ai.stream_decoder import StreamDecoder
from lumina.models import ContentDelta, Done, Malformed


def data_line(text: str) -> bytes:
    payload = json.dumps({"choices": [{"delta": {"content": text}}]}, ensure_ascii=False)
    return f"data: {payload}\n".encode("utf-8")


def texts(frames):
    return [f.text for f in frames if isinstance(f, ContentDelta)]


class TestStreamDecoder(unittest.TestCase):
    def setUp(self):
        self.decoder = StreamDecoder()

    def test_line_split_across_chunks(self):
        first = self.decoder.feed(b'data: {"choices":[{"delta":{"content":"He')
        second = self.decoder.feed(b'llo"}}]}\n')

        self.assertEqual(first, [])
        self.assertEqual(second, [ContentDelta(text="Hello")])
        self.assertEqual(self.decoder.pending, "")

    def test_byte_at_a_time(self):
        stream = data_line("Hi") + data_line(" there") + b"data: [DONE]\n"
        frames = []
        for i in range(len(stream)):
            frames.extend(self.decoder.feed(stream[i:i + 1]))

        self.assertEqual(texts(frames), ["Hi", " there"])
        self.assertIsInstance(frames[-1], Done)

    def test_several_lines_in_one_chunk(self):
        frames = self.decoder.feed(data_line("a") + data_line("b") + data_line("c"))

        self.assertEqual(texts(frames), ["a", "b", "c"])

    def test_malformed_line_is_skipped(self):
        frames = self.decoder.feed(b"data: {not json\n" + data_line("ok"))

        self.assertIsInstance(frames[0], Malformed)
        self.assertEqual(frames[1], ContentDelta(text="ok"))
        self.assertEqual(self.decoder.malformed_count, 1)

    def test_payload_without_choices_is_malformed(self):
        frames = self.decoder.feed(b'data: {"id":"x"}\n')

        self.assertEqual(len(frames), 1)
        self.assertIsInstance(frames[0], Malformed)

    def test_non_data_lines_are_ignored(self):
        frames = self.decoder.feed(
            b": keep-alive\n"
            b"event: message\n"
            b"\n"
            + data_line("x")
        )

        self.assertEqual(frames, [ContentDelta(text="x")])

    def test_empty_and_missing_content_produce_nothing(self):
        frames = self.decoder.feed(
            data_line("")
            + b'data: {"choices":[{"delta":{}}]}\n'
            + b'data: {"choices":[]}\n'
        )

        self.assertEqual(frames, [])
        self.assertEqual(self.decoder.malformed_count, 0)

    def test_carriage_returns_are_stripped(self):
        frames = self.decoder.feed(data_line("line\r\nnext").replace(b"\n", b"\r\n"))

        self.assertEqual(texts(frames), ["line\nnext"])

    def test_done_ends_decoding(self):
        frames = self.decoder.feed(data_line("last") + b"data: [DONE]\n" + data_line("ignored"))

        self.assertEqual(frames, [ContentDelta(text="last"), Done()])
        self.assertTrue(self.decoder.finished)
        self.assertEqual(self.decoder.feed(data_line("later")), [])
        self.assertEqual(self.decoder.close(), [])

    def test_close_without_done_completes(self):
        self.decoder.feed(data_line("partial answer"))
        self.decoder.feed(b'data: {"choices":[{"delta":{"content":"cut')

        self.assertEqual(self.decoder.close(), [Done()])
        self.assertEqual(self.decoder.close(), [])
        self.assertEqual(self.decoder.pending, "")

    def test_multibyte_character_split_across_chunks(self):
        line = data_line("café ✓")
        split = line.index("é".encode("utf-8")) + 1

        first = self.decoder.feed(line[:split])
        second = self.decoder.feed(line[split:])

        self.assertEqual(first, [])
        self.assertEqual(texts(second), ["café ✓"])

    def test_invalid_utf8_is_replaced(self):
        frames = self.decoder.feed(b'data: {"choices":[{"delta":{"content":"a\xffb"}}]}\n')

        self.assertEqual(texts(frames), ["a\ufffdb"])


if __name__ == "__main__":
    unittest.main()
