"""Configuration and voice-trigger data models."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class Language(enum.IntEnum):
    """Language used by the recognition algorithms."""

    ZH = 0
    EN = 1

    @classmethod
    def from_code(cls, code: str | None) -> "Language":
        """Map a language code such as ``"zh"`` or ``"en"``; unknown codes fall back to Chinese."""
        if code == "en":
            return cls.EN
        return cls.ZH


@dataclass
class MicPos:
    """Position of one microphone as a list of coordinates."""

    pos: list[float] = field(default_factory=list)


@dataclass
class DefVTConfig:
    """A default voice-trigger word as read from the configuration file."""

    vt_type: int = 0
    vt_word: str = ""
    vt_phone: str = ""
    vt_avg_score: float = 0.0
    vt_min_score: float = 0.0
    vt_left_sil_det: bool = False
    vt_right_sil_det: bool = False
    vt_remote_check_with_aec: bool = False
    vt_remote_check_without_aec: bool = False
    vt_local_classify_check: bool = False
    vt_classify_shield: float = 0.0
    vt_nnet_path: str = ""


@dataclass
class VTAlgConfig:
    """Detection parameters attached to a voice-trigger word."""

    vt_block_avg_score: float = 0.0
    vt_block_min_score: float = 0.0
    vt_left_sil_det: bool = False
    vt_right_sil_det: bool = False
    vt_remote_check_with_aec: bool = False
    vt_remote_check_without_aec: bool = False
    vt_local_classify_check: bool = False
    vt_classify_shield: float = 0.0
    nnet_path: str = ""


@dataclass
class VTWord:
    """A voice-trigger word exchanged between processes."""

    vt_word: str = ""
    vt_phone: str = ""
    vt_type: int = 0
    use_default_config: bool = True
    alg_config: VTAlgConfig = field(default_factory=VTAlgConfig)


@dataclass
class AlgConfig:
    """The algorithm section of the configuration."""

    alg_use_legacy_ssp_config_file: bool = False
    alg_use_legacy_vt_config_file: bool = False
    alg_legacy_dir: str = ""
    alg_lan: Language = Language.ZH
    alg_rs_mics: list[int] = field(default_factory=list)
    alg_aec: bool = False
    alg_aec_mics: list[int] = field(default_factory=list)
    alg_aec_ref_mics: list[int] = field(default_factory=list)
    alg_aec_shield: float = 0.0
    alg_aec_aff_cpus: list[int] = field(default_factory=list)
    alg_aec_mat_aff_cpus: list[int] = field(default_factory=list)
    alg_raw_stream_sl_direction: float = 0.0
    alg_raw_stream_bf: bool = False
    alg_raw_stream_agc: bool = False
    alg_vt_enable: bool = False
    alg_vad_enable: bool = False
    alg_vad_mics: list[int] = field(default_factory=list)
    alg_vad_baserange: float = 0.0
    alg_vad_dynrange_min: float = 0.0
    alg_vad_dynrange_max: float = 0.0
    alg_bf_scaling: float = 1.0
    alg_need_i2s_delay_mics: list[int] = field(default_factory=list)
    alg_i2s_delay_mics: list[float] = field(default_factory=list)
    alg_mic_pos: list[MicPos] = field(default_factory=list)
    alg_sl_mics: list[int] = field(default_factory=list)
    alg_bf_mics: list[int] = field(default_factory=list)
    alg_opus_compress: bool = False
    alg_vt_phomod: str = ""
    alg_vt_dnnmod: str = ""
    alg_rs_delay_on_left_right_channel: bool = False
    def_vt_configs: list[DefVTConfig] = field(default_factory=list)


@dataclass
class DebugConfig:
    """The debug section of the configuration."""

    mic_array_record: bool = False
    preprocessed_result_record: bool = False
    processed_result_record: bool = False
    rs_record: bool = False
    aec_record: bool = False
    bf_record: bool = False
    bf_raw_record: bool = False
    vad_record: bool = False
    debug_opu_record: bool = False
    recording_path: str = ""


@dataclass
class RawStreamConfig:
    """Format of the raw audio stream."""

    raw_stream_channel_num: int = 0
    raw_stream_sample_rate: int = 0
    raw_stream_byte: int = 0


@dataclass
class SirenConfig:
    """The complete runtime configuration."""

    mic_num: int = 0
    mic_channel_num: int = 0
    mic_sample_rate: int = 0
    mic_audio_byte: int = 0
    mic_frame_length: int = 0
    siren_use_share_mem: bool = False
    siren_recording_socket_rmem: int = 0
    siren_recording_socket_wmem: int = 0
    siren_input_err_retry_num: int = 0
    siren_input_err_retry_timeout: int = 0
    udp_port: int = 0
    alg_config: AlgConfig = field(default_factory=AlgConfig)
    debug_config: DebugConfig = field(default_factory=DebugConfig)
    raw_stream_config: RawStreamConfig = field(default_factory=RawStreamConfig)