"""Parsing of the algorithm section of the configuration document."""

from __future__ import annotations

import logging
import struct
from collections.abc import Mapping
from typing import Any

from .fields import JsonKind, float_items, get_optional, get_required, int_items, kind_of
from .models import Language, MicPos, SirenConfig

log = logging.getLogger(__name__)

KEY_ALG_USE_LEGACY_CONFIG_FILE = "alg_use_legacy_config_file"
KEY_ALG_LEGACY_CONFIG_FILE_PATH = "alg_legacy_config_file_path"
KEY_ALG_LAN = "alg_lan"
KEY_ALG_RS_MICS = "alg_rs_mics"
KEY_ALG_AEC = "alg_aec"
KEY_ALG_AEC_MICS = "alg_aec_mics"
KEY_ALG_AEC_REF_MICS = "alg_aec_ref_mics"
KEY_ALG_AEC_SHIELD = "alg_aec_shield"
KEY_ALG_AEC_AFF_CPUS = "alg_aec_aff_cpus"
KEY_ALG_AEC_MAT_AFF_CPUS = "alg_aec_mat_aff_cpus"
KEY_ALG_RAW_STREAM_SL_DIRECTION = "alg_raw_stream_sl_direction"
KEY_ALG_RAW_STREAM_BF = "alg_raw_stream_bf"
KEY_ALG_RAW_STREAM_AGC = "alg_raw_stream_agc"
KEY_ALG_VT_ENABLE = "alg_vt_enable"
KEY_ALG_VAD_ENABLE = "alg_vad_enable"
KEY_ALG_VAD_MICS = "alg_vad_mics"
KEY_ALG_VAD_BASERANGE = "alg_vad_baserange"
KEY_ALG_VAD_DYNRANGE_MIN = "alg_vad_dynrange_min"
KEY_ALG_VAD_DYNRANGE_MAX = "alg_vad_dynrange_max"
KEY_ALG_BF_SCALING = "alg_bf_scaling"
KEY_ALG_NEED_I2S_DELAY_MICS = "alg_need_i2s_delay_mics"
KEY_ALG_I2S_DELAY_MICS = "alg_i2s_delay_mics"
KEY_ALG_MIC_POS = "alg_mic_pos"
KEY_ALG_SL_MICS = "alg_sl_mics"
KEY_ALG_BF_MICS = "alg_bf_mics"
KEY_ALG_OPUS_COMPRESS = "alg_opus_compress"
KEY_ALG_VT_PHOMOD = "alg_vt_phomod"
KEY_ALG_VT_DNNMOD = "alg_vt_dnnmod"
KEY_ALG_RS_DELAY_ON_LEFT_RIGHT_CHANNEL = "alg_rs_delay_on_left_right_channel"
KEY_RAW_STREAM_CHANNEL_NUM = "raw_stream_channel_num"
KEY_RAW_STREAM_SAMPLE_RATE = "raw_stream_sample_rate"
KEY_RAW_STREAM_BYTE = "raw_stream_byte"

DEFAULT_BF_SCALING = 1.0

_FLOAT32 = struct.Struct("<f")


def _to_float32(value: float) -> float:
    return _FLOAT32.unpack(_FLOAT32.pack(value))[0]


def _printable(values: list[Any]) -> str:
    return " ".join(str(v) for v in values)


def _extend_ints(section: Mapping[str, Any], key: str, target: list[int]) -> None:
    target.extend(int_items(get_required(section, key, JsonKind.ARRAY)))
    log.info("%s: %s", key, _printable(target))


def _mic_positions(values: list[Any]) -> list[MicPos]:
    return [MicPos(float_items(item)) for item in values if kind_of(item) is JsonKind.ARRAY]


def parse_alg_config(section: Mapping[str, Any], config: SirenConfig) -> SirenConfig:
    """Fill the algorithm and raw-stream fields of *config* from *section*.

    Every key except the beamforming scale is required; integer and float
    lists keep only elements of the expected kind and are appended to.
    Raises ConfigParseError when a required key is missing or mistyped.
    """
    alg = config.alg_config

    use_legacy = get_required(section, KEY_ALG_USE_LEGACY_CONFIG_FILE, JsonKind.BOOLEAN)
    log.info("use legacy config file %s", use_legacy)
    alg.alg_use_legacy_ssp_config_file = use_legacy
    alg.alg_use_legacy_vt_config_file = use_legacy

    alg.alg_legacy_dir = get_required(section, KEY_ALG_LEGACY_CONFIG_FILE_PATH, JsonKind.STRING)
    log.info("legacy file path set to %s", alg.alg_legacy_dir)

    alg.alg_lan = Language.from_code(get_required(section, KEY_ALG_LAN, JsonKind.STRING))

    _extend_ints(section, KEY_ALG_RS_MICS, alg.alg_rs_mics)

    alg.alg_aec = get_required(section, KEY_ALG_AEC, JsonKind.BOOLEAN)
    log.info("enable aec %s", alg.alg_aec)

    _extend_ints(section, KEY_ALG_AEC_MICS, alg.alg_aec_mics)
    _extend_ints(section, KEY_ALG_AEC_REF_MICS, alg.alg_aec_ref_mics)

    alg.alg_aec_shield = _to_float32(get_required(section, KEY_ALG_AEC_SHIELD, JsonKind.DOUBLE))
    log.info("set aec shield to %f", alg.alg_aec_shield)

    _extend_ints(section, KEY_ALG_AEC_AFF_CPUS, alg.alg_aec_aff_cpus)
    _extend_ints(section, KEY_ALG_AEC_MAT_AFF_CPUS, alg.alg_aec_mat_aff_cpus)

    alg.alg_raw_stream_sl_direction = _to_float32(
        get_required(section, KEY_ALG_RAW_STREAM_SL_DIRECTION, JsonKind.DOUBLE)
    )
    log.info("set raw stream sl direction to %f", alg.alg_raw_stream_sl_direction)

    alg.alg_raw_stream_bf = get_required(section, KEY_ALG_RAW_STREAM_BF, JsonKind.BOOLEAN)
    alg.alg_raw_stream_agc = get_required(section, KEY_ALG_RAW_STREAM_AGC, JsonKind.BOOLEAN)
    alg.alg_vt_enable = get_required(section, KEY_ALG_VT_ENABLE, JsonKind.BOOLEAN)
    alg.alg_vad_enable = get_required(section, KEY_ALG_VAD_ENABLE, JsonKind.BOOLEAN)
    log.info(
        "raw stream bf %s agc %s, vt %s, vad %s",
        alg.alg_raw_stream_bf,
        alg.alg_raw_stream_agc,
        alg.alg_vt_enable,
        alg.alg_vad_enable,
    )

    _extend_ints(section, KEY_ALG_VAD_MICS, alg.alg_vad_mics)

    alg.alg_vad_baserange = get_required(section, KEY_ALG_VAD_BASERANGE, JsonKind.DOUBLE)
    alg.alg_vad_dynrange_min = get_required(section, KEY_ALG_VAD_DYNRANGE_MIN, JsonKind.DOUBLE)
    alg.alg_vad_dynrange_max = get_required(section, KEY_ALG_VAD_DYNRANGE_MAX, JsonKind.DOUBLE)
    log.info(
        "vad baserange %f dynrange min %f max %f",
        alg.alg_vad_baserange,
        alg.alg_vad_dynrange_min,
        alg.alg_vad_dynrange_max,
    )

    scaling = get_optional(section, KEY_ALG_BF_SCALING, JsonKind.DOUBLE)
    alg.alg_bf_scaling = DEFAULT_BF_SCALING if scaling is None else scaling
    log.info("bf scaling: %f", alg.alg_bf_scaling)

    alg.alg_need_i2s_delay_mics.extend(
        int_items(get_required(section, KEY_ALG_NEED_I2S_DELAY_MICS, JsonKind.ARRAY))
    )
    for mic in alg.alg_need_i2s_delay_mics:
        log.info("mic %d use delay", mic)

    alg.alg_i2s_delay_mics.extend(
        float_items(get_required(section, KEY_ALG_I2S_DELAY_MICS, JsonKind.ARRAY))
    )
    for delay in alg.alg_i2s_delay_mics:
        log.info("mic use delay %f", delay)

    alg.alg_mic_pos.extend(_mic_positions(get_required(section, KEY_ALG_MIC_POS, JsonKind.ARRAY)))
    for mic in alg.alg_mic_pos:
        log.info("mic pos: %s", _printable(mic.pos))

    _extend_ints(section, KEY_ALG_SL_MICS, alg.alg_sl_mics)
    _extend_ints(section, KEY_ALG_BF_MICS, alg.alg_bf_mics)

    alg.alg_opus_compress = get_required(section, KEY_ALG_OPUS_COMPRESS, JsonKind.BOOLEAN)
    log.info("enable opus compression %s", alg.alg_opus_compress)

    alg.alg_vt_phomod = get_required(section, KEY_ALG_VT_PHOMOD, JsonKind.STRING)
    log.info("phomod file path set to %s", alg.alg_vt_phomod)
    alg.alg_vt_dnnmod = get_required(section, KEY_ALG_VT_DNNMOD, JsonKind.STRING)
    log.info("dnnmod file path set to %s", alg.alg_vt_dnnmod)

    alg.alg_rs_delay_on_left_right_channel = get_required(
        section, KEY_ALG_RS_DELAY_ON_LEFT_RIGHT_CHANNEL, JsonKind.BOOLEAN
    )
    log.info("enable rs delay %s", alg.alg_rs_delay_on_left_right_channel)

    raw = config.raw_stream_config
    raw.raw_stream_channel_num = get_required(section, KEY_RAW_STREAM_CHANNEL_NUM, JsonKind.INT)
    raw.raw_stream_sample_rate = get_required(section, KEY_RAW_STREAM_SAMPLE_RATE, JsonKind.INT)
    raw.raw_stream_byte = get_required(section, KEY_RAW_STREAM_BYTE, JsonKind.INT)
    log.info(
        "raw stream channel num %d sample rate %d byte %d",
        raw.raw_stream_channel_num,
        raw.raw_stream_sample_rate,
        raw.raw_stream_byte,
    )
    return config