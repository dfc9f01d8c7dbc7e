"""Parsing of the default voice-trigger words and the debug section."""

from __future__ import annotations

import logging
import struct
from collections.abc import Mapping
from typing import Any

from .fields import JsonKind, get_optional, get_required, kind_of
from .models import DefVTConfig, SirenConfig

log = logging.getLogger(__name__)

KEY_ALG_DEF_VT = "alg_def_vt"
KEY_VT_TYPE = "vt_type"
KEY_VT_WORD = "vt_word"
KEY_VT_PHONE = "vt_phone"
KEY_VT_AVG_SCORE = "vt_avg_score"
KEY_VT_MIN_SCORE = "vt_min_score"
KEY_VT_LEFT_SIL_DET = "vt_left_sil_det"
KEY_VT_RIGHT_SIL_DET = "vt_right_sil_det"
KEY_VT_REMOTE_CHECK_WITH_AEC = "vt_remote_check_with_aec"
KEY_VT_REMOTE_CHECK_WITHOUT_AEC = "vt_remote_check_without_aec"
KEY_VT_LOCAL_CLASSIFY_CHECK = "vt_local_classify_check"
KEY_VT_CLASSIFY_SHIELD = "vt_classify_shield"
KEY_NNET_PATH = "nnet_path"

KEY_DEBUG_MIC_ARRAY_RECORD = "mic_array_record"
KEY_DEBUG_PRE_RESULT_RECORD = "preprocessed_result_record"
KEY_DEBUG_PROC_RESULT_RECORD = "processed_result_record"
KEY_DEBUG_RS_RECORD = "rs_record"
KEY_DEBUG_AEC_RECORD = "aec_record"
KEY_DEBUG_BF_RECORD = "bf_record"
KEY_DEBUG_BF_RAW_RECORD = "bf_raw_record"
KEY_DEBUG_VAD_RECORD = "vad_record"
KEY_DEBUG_OPU_RECORD = "debug_opu_record"
KEY_DEBUG_RECORD_PATH = "record_path"

DEFAULT_VT_TYPE = 4

_FLOAT32 = struct.Struct("<f")


def _to_float32(value: float) -> float:
    return _FLOAT32.unpack(_FLOAT32.pack(value))[0]


# key -> (attribute, expected kind, fallback when the kind is wrong, convert)
_VT_FIELDS: dict[str, tuple[str, JsonKind, Any, Any]] = {
    KEY_VT_TYPE: ("vt_type", JsonKind.INT, DEFAULT_VT_TYPE, int),
    KEY_VT_WORD: ("vt_word", JsonKind.STRING, "", str),
    KEY_VT_PHONE: ("vt_phone", JsonKind.STRING, "", str),
    KEY_VT_AVG_SCORE: ("vt_avg_score", JsonKind.DOUBLE, 0.0, _to_float32),
    KEY_VT_MIN_SCORE: ("vt_min_score", JsonKind.DOUBLE, 0.0, _to_float32),
    KEY_VT_LEFT_SIL_DET: ("vt_left_sil_det", JsonKind.BOOLEAN, False, bool),
    KEY_VT_RIGHT_SIL_DET: ("vt_right_sil_det", JsonKind.BOOLEAN, False, bool),
    KEY_VT_REMOTE_CHECK_WITH_AEC: ("vt_remote_check_with_aec", JsonKind.BOOLEAN, False, bool),
    KEY_VT_REMOTE_CHECK_WITHOUT_AEC: ("vt_remote_check_without_aec", JsonKind.BOOLEAN, False, bool),
    KEY_VT_LOCAL_CLASSIFY_CHECK: ("vt_local_classify_check", JsonKind.BOOLEAN, False, bool),
    KEY_VT_CLASSIFY_SHIELD: ("vt_classify_shield", JsonKind.DOUBLE, 0.0, _to_float32),
    KEY_NNET_PATH: ("vt_nnet_path", JsonKind.STRING, "", str),
}

_DEBUG_FLAGS = (
    (KEY_DEBUG_MIC_ARRAY_RECORD, "mic_array_record"),
    (KEY_DEBUG_PRE_RESULT_RECORD, "preprocessed_result_record"),
    (KEY_DEBUG_PROC_RESULT_RECORD, "processed_result_record"),
    (KEY_DEBUG_RS_RECORD, "rs_record"),
    (KEY_DEBUG_AEC_RECORD, "aec_record"),
    (KEY_DEBUG_BF_RECORD, "bf_record"),
    (KEY_DEBUG_BF_RAW_RECORD, "bf_raw_record"),
    (KEY_DEBUG_VAD_RECORD, "vad_record"),
    (KEY_DEBUG_OPU_RECORD, "debug_opu_record"),
)


def parse_def_vt_config(item: Mapping[str, Any]) -> DefVTConfig:
    """Build a DefVTConfig from one JSON object.

    A known key holding a value of the wrong kind sets its field to the
    fallback (type 4, empty string, zero or false); unknown keys are ignored.
    """
    config = DefVTConfig()
    for key, value in item.items():
        spec = _VT_FIELDS.get(key)
        if spec is None:
            log.warning("unknown key %s in def vt config", key)
            continue
        attr, kind, fallback, convert = spec
        if kind_of(value) is kind:
            setattr(config, attr, convert(value))
        else:
            log.warning("expect type %s for key %s", kind.value, key)
            setattr(config, attr, fallback)
    log.info("parsed def vt config %s", config)
    return config


def parse_def_vt_configs(section: Mapping[str, Any], config: SirenConfig) -> SirenConfig:
    """Append the default voice-trigger words found in *section* to *config*.

    The list is optional; a missing or non-array value adds nothing, and
    array elements that are not objects are skipped.
    """
    items = section.get(KEY_ALG_DEF_VT)
    if items is None and KEY_ALG_DEF_VT not in section:
        log.warning("no default vt word found in config")
        return config
    if kind_of(items) is not JsonKind.ARRAY:
        log.warning("expect type array with key %s", KEY_ALG_DEF_VT)
        return config
    config.alg_config.def_vt_configs.extend(
        parse_def_vt_config(item) for item in items if kind_of(item) is JsonKind.OBJECT
    )
    return config


def parse_debug_config(section: Mapping[str, Any], config: SirenConfig) -> SirenConfig:
    """Fill the debug fields of *config* from *section*.

    Recording flags are optional and left unchanged when absent or mistyped;
    the recording path is required and raises ConfigParseError otherwise.
    """
    debug = config.debug_config
    for key, attr in _DEBUG_FLAGS:
        value = get_optional(section, key, JsonKind.BOOLEAN)
        if value is not None:
            setattr(debug, attr, value)
            log.info("enable %s %s", key, "true" if value else "false")
    debug.recording_path = get_required(section, KEY_DEBUG_RECORD_PATH, JsonKind.STRING)
    log.info("record path is %s", debug.recording_path)
    return config