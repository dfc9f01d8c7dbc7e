"""Framed messages and the packed voice-trigger word list."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from .models import VTAlgConfig, VTWord

MAGIC = b"aabb"
MSG_SYNC_VT_WORD_LIST = 1

_HEADER = struct.Struct("<4sii")
_PREFIX = struct.Struct("<iiii")
# total_len, vt_type, avg score, min score, classify shield,
# five detection flags, padding, word/phone/nnet path sizes
_RECORD = struct.Struct("<iifff?????3xiii")


class MessageError(ValueError):
    """Raised when a message is malformed."""


@dataclass
class Message:
    """A message with an integer id and an opaque payload."""

    msg: int
    data: bytes = b""

    def __post_init__(self) -> None:
        self.data = bytes(self.data)

    @property
    def length(self) -> int:
        """Length of the payload in bytes."""
        return len(self.data)

    def encode(self) -> bytes:
        """Serialise header and payload."""
        return _HEADER.pack(MAGIC, self.msg, len(self.data)) + self.data

    @classmethod
    def decode_header(cls, data: bytes) -> tuple[int, int]:
        """Return ``(msg, payload_length)`` from the start of *data*."""
        if len(data) < _HEADER.size:
            raise MessageError(f"header needs {_HEADER.size} bytes, got {len(data)}")
        magic, msg, length = _HEADER.unpack_from(data)
        if magic != MAGIC:
            raise MessageError(f"bad magic {magic!r}")
        if length < 0:
            raise MessageError(f"negative payload length {length}")
        return msg, length

    @classmethod
    def decode(cls, data: bytes) -> "Message":
        """Decode one message from *data*; trailing bytes are ignored."""
        msg, length = cls.decode_header(data)
        end = _HEADER.size + length
        if len(data) < end:
            raise MessageError(f"payload needs {length} bytes, got {len(data) - _HEADER.size}")
        return cls(msg, data[_HEADER.size:end])

    def copy(self) -> "Message":
        """Return an equal, independent message."""
        return Message(self.msg, self.data)


def _record_length(word: bytes, phone: bytes, nnet: bytes) -> int:
    raw = _RECORD.size + len(word) + len(phone) + len(nnet) + 3
    return raw + (8 - raw % 8)


def message_from_vt_words(vt_words: list[VTWord]) -> Message:
    """Pack voice-trigger words into a sync message."""
    if not vt_words:
        return Message(MSG_SYNC_VT_WORD_LIST)

    parts = [_PREFIX.pack(len(vt_words), 0, 0, 0)]
    for word in vt_words:
        cfg = word.alg_config
        text = word.vt_word.encode("utf-8")
        phone = word.vt_phone.encode("utf-8")
        nnet = cfg.nnet_path.encode("utf-8")
        total = _record_length(text, phone, nnet)
        record = _RECORD.pack(
            total,
            word.vt_type,
            cfg.vt_block_avg_score,
            cfg.vt_block_min_score,
            cfg.vt_classify_shield,
            cfg.vt_left_sil_det,
            cfg.vt_right_sil_det,
            cfg.vt_remote_check_with_aec,
            cfg.vt_remote_check_without_aec,
            cfg.vt_local_classify_check,
            len(text),
            len(phone),
            len(nnet),
        )
        body = record + text + b"\0" + phone + b"\0" + nnet + b"\0"
        parts.append(body.ljust(total, b"\0"))
    return Message(MSG_SYNC_VT_WORD_LIST, b"".join(parts))


def _c_string(data: bytes, start: int, size: int, what: str) -> str:
    end = start + size
    if end >= len(data):
        raise MessageError(f"{what} runs past the end of the message")
    if data[end] != 0:
        raise MessageError(f"{what} ends with {data[end]}, need 0")
    return data[start:end].split(b"\0", 1)[0].decode("utf-8", errors="replace")


def vt_words_from_message(message: Message) -> list[VTWord]:
    """Unpack the voice-trigger words carried by a sync message."""
    if message.msg != MSG_SYNC_VT_WORD_LIST:
        raise MessageError("message is not a vt word sync message")
    data = message.data
    if not data:
        raise MessageError("message has no data")
    if len(data) < _PREFIX.size:
        raise MessageError("message is too short for a word count")

    count = _PREFIX.unpack_from(data)[0]
    if len(data) < _RECORD.size * count:
        raise MessageError(f"len is {len(data)}, cannot have {count} configs")

    words = []
    offset = _PREFIX.size
    for _ in range(count):
        if offset + _RECORD.size > len(data):
            raise MessageError("record runs past the end of the message")
        (
            total,
            vt_type,
            avg_score,
            min_score,
            shield,
            left_sil,
            right_sil,
            rc_with_aec,
            rc_without_aec,
            local_check,
            word_size,
            phone_size,
            nnet_size,
        ) = _RECORD.unpack_from(data, offset)

        pos = offset + _RECORD.size
        text = _c_string(data, pos, word_size, "vt word")
        pos += word_size + 1
        phone = _c_string(data, pos, phone_size, "vt phone")
        nnet = ""
        if nnet_size:
            pos += phone_size + 1
            nnet = _c_string(data, pos, nnet_size, "vt nnet path")

        words.append(
            VTWord(
                vt_word=text,
                vt_phone=phone,
                vt_type=vt_type,
                use_default_config=False,
                alg_config=VTAlgConfig(
                    vt_block_avg_score=avg_score,
                    vt_block_min_score=min_score,
                    vt_left_sil_det=left_sil,
                    vt_right_sil_det=right_sil,
                    vt_remote_check_with_aec=rc_with_aec,
                    vt_remote_check_without_aec=rc_without_aec,
                    vt_local_classify_check=local_check,
                    vt_classify_shield=shield,
                    nnet_path=nnet,
                ),
            )
        )
        if total <= 0:
            raise MessageError(f"invalid record length {total}")
        offset += total
    return words