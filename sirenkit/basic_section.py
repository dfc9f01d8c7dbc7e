"""Parsing of the basic section of the configuration document."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .fields import JsonKind, get_required
from .models import SirenConfig

log = logging.getLogger(__name__)

KEY_MIC_NUM = "mic_num"
KEY_MIC_CHANNEL_NUM = "mic_channel_num"
KEY_MIC_SAMPLE_RATE = "mic_sample_rate"
KEY_MIC_AUDIO_BYTE = "mic_audio_byte"
KEY_MIC_FRAME_LENGTH = "mic_frame_length"
KEY_SIREN_IPC = "siren_ipc"
KEY_SIREN_CHANNEL_RMEM = "siren_channel_rmem"
KEY_SIREN_CHANNEL_WMEM = "siren_channel_wmem"
KEY_SIREN_INPUT_ERR_RETRY_NUM = "siren_input_err_retry_num"
KEY_SIREN_INPUT_ERR_RETRY_TIMEOUT = "siren_input_err_retry_timeout"
KEY_SIREN_MONITOR_UDP_PORT = "siren_monitor_udp_port"

IPC_CHANNEL = "channel"

_LEADING_INT_FIELDS = (
    (KEY_MIC_NUM, "mic_num"),
    (KEY_MIC_CHANNEL_NUM, "mic_channel_num"),
    (KEY_MIC_SAMPLE_RATE, "mic_sample_rate"),
    (KEY_MIC_AUDIO_BYTE, "mic_audio_byte"),
    (KEY_MIC_FRAME_LENGTH, "mic_frame_length"),
)

_TRAILING_INT_FIELDS = (
    (KEY_SIREN_CHANNEL_RMEM, "siren_recording_socket_rmem"),
    (KEY_SIREN_CHANNEL_WMEM, "siren_recording_socket_wmem"),
    (KEY_SIREN_INPUT_ERR_RETRY_NUM, "siren_input_err_retry_num"),
    (KEY_SIREN_INPUT_ERR_RETRY_TIMEOUT, "siren_input_err_retry_timeout"),
    (KEY_SIREN_MONITOR_UDP_PORT, "udp_port"),
)


def _read_ints(section: Mapping[str, Any], config: SirenConfig, fields: tuple[tuple[str, str], ...]) -> None:
    for key, attr in fields:
        value = get_required(section, key, JsonKind.INT)
        setattr(config, attr, value)
        log.info("set %s to %d", key, value)


def parse_basic_config(section: Mapping[str, Any], config: SirenConfig) -> SirenConfig:
    """Fill the basic fields of *config* from *section*; every key is required.

    Raises ConfigParseError when a key is missing or has the wrong type.
    """
    _read_ints(section, config, _LEADING_INT_FIELDS)

    ipc = get_required(section, KEY_SIREN_IPC, JsonKind.STRING)
    log.info("use ipc %s", ipc)
    config.siren_use_share_mem = ipc != IPC_CHANNEL

    _read_ints(section, config, _TRAILING_INT_FIELDS)
    return config