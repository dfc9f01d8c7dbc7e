import copy
import json

import pytest

from sirenkit.config import ConfigurationManager, load_config_from_json
from sirenkit.fields import ConfigOpenError, ConfigParseError
from sirenkit.models import Language, SirenConfig

DOCUMENT = {
    "basic_config": {
        "mic_num": 8,
        "mic_channel_num": 10,
        "mic_sample_rate": 48000,
        "mic_audio_byte": 4,
        "mic_frame_length": 10,
        "siren_ipc": "channel",
        "siren_channel_rmem": 1048576,
        "siren_channel_wmem": 1048576,
        "siren_input_err_retry_num": 5,
        "siren_input_err_retry_timeout": 100,
        "siren_monitor_udp_port": 9899,
    },
    "alg_config": {
        "alg_use_legacy_config_file": True,
        "alg_legacy_config_file_path": "/opt/workdir",
        "alg_lan": "en",
        "alg_rs_mics": [0, 1, 2, 3],
        "alg_aec": True,
        "alg_aec_mics": [0, 1],
        "alg_aec_ref_mics": [8, 9],
        "alg_aec_shield": 0.5,
        "alg_aec_aff_cpus": [1],
        "alg_aec_mat_aff_cpus": [2],
        "alg_raw_stream_sl_direction": 0.25,
        "alg_raw_stream_bf": False,
        "alg_raw_stream_agc": True,
        "alg_vt_enable": True,
        "alg_vad_enable": False,
        "alg_vad_mics": [0],
        "alg_vad_baserange": 1.5,
        "alg_vad_dynrange_min": 2.5,
        "alg_vad_dynrange_max": 3.5,
        "alg_need_i2s_delay_mics": [2],
        "alg_i2s_delay_mics": [0.5],
        "alg_mic_pos": [[0.0, 1.0, 0.0], [1.0, 0.0, 0.0]],
        "alg_sl_mics": [0, 1],
        "alg_bf_mics": [0, 1],
        "alg_opus_compress": True,
        "alg_vt_phomod": "/opt/phonetable",
        "alg_vt_dnnmod": "/opt/final.mod",
        "alg_rs_delay_on_left_right_channel": False,
        "raw_stream_channel_num": 10,
        "raw_stream_sample_rate": 48000,
        "raw_stream_byte": 4,
        "alg_def_vt": [
            {"vt_type": 1, "vt_word": "hello", "vt_phone": "h e l o", "vt_avg_score": 4.5}
        ],
    },
    "debug_config": {"bf_record": True, "record_path": "/tmp/rec"},
}


def _doc(**removals):
    doc = copy.deepcopy(DOCUMENT)
    for section, key in removals.items():
        if key is None:
            del doc[section]
        else:
            del doc[section][key]
    return doc


def test_load_full_document():
    config = load_config_from_json(json.dumps(DOCUMENT))
    assert config.mic_num == 8
    assert config.udp_port == 9899
    assert config.siren_use_share_mem is False
    assert config.alg_config.alg_lan is Language.EN
    assert config.alg_config.alg_aec_ref_mics == [8, 9]
    assert config.alg_config.alg_bf_scaling == 1.0
    assert [m.pos for m in config.alg_config.alg_mic_pos] == [[0.0, 1.0, 0.0], [1.0, 0.0, 0.0]]
    assert config.raw_stream_config.raw_stream_sample_rate == 48000
    assert config.debug_config.bf_record is True
    assert config.debug_config.recording_path == "/tmp/rec"


def test_def_vt_words_are_loaded():
    config = load_config_from_json(json.dumps(DOCUMENT))
    words = config.alg_config.def_vt_configs
    assert len(words) == 1
    assert words[0].vt_word == "hello"
    assert words[0].vt_type == 1
    assert words[0].vt_avg_score == 4.5


def test_load_into_given_config_returns_same_object():
    target = SirenConfig()
    result = load_config_from_json(json.dumps(DOCUMENT), target)
    assert result is target
    assert target.mic_sample_rate == 48000


def test_invalid_json_raises():
    with pytest.raises(ConfigParseError):
        load_config_from_json("{not json")


def test_non_object_document_raises():
    with pytest.raises(ConfigParseError):
        load_config_from_json("[1, 2]")


@pytest.mark.parametrize("section", ["basic_config", "alg_config", "debug_config"])
def test_missing_section_raises(section):
    with pytest.raises(ConfigParseError):
        load_config_from_json(json.dumps(_doc(**{section: None})))


def test_missing_required_key_raises():
    with pytest.raises(ConfigParseError):
        load_config_from_json(json.dumps(_doc(debug_config="record_path")))


def test_update_config_file_never_uses_remote():
    assert ConfigurationManager().update_config_file() is False


def test_manager_reads_user_file(tmp_path):
    path = tmp_path / "user.json"
    path.write_text(json.dumps(DOCUMENT), encoding="utf-8")
    manager = ConfigurationManager(path, backup_file_path=tmp_path / "missing.json")
    config = manager.parse_config_file()
    assert config is manager.siren_config
    assert config.alg_config.alg_vt_dnnmod == "/opt/final.mod"


def test_manager_falls_back_to_backup(tmp_path):
    backup = tmp_path / "backup.json"
    backup.write_text(json.dumps(DOCUMENT), encoding="utf-8")
    manager = ConfigurationManager(tmp_path / "absent.json", backup_file_path=backup)
    assert manager.parse_config_file().mic_channel_num == 10


def test_manager_without_path_uses_backup(tmp_path):
    backup = tmp_path / "backup.json"
    backup.write_text(json.dumps(DOCUMENT), encoding="utf-8")
    manager = ConfigurationManager(backup_file_path=backup)
    assert manager.valid_path is False
    assert manager.parse_config_file().udp_port == 9899


def test_manager_missing_backup_raises_open_error(tmp_path):
    manager = ConfigurationManager(tmp_path / "a.json", backup_file_path=tmp_path / "b.json")
    with pytest.raises(ConfigOpenError):
        manager.parse_config_file()


def test_bad_user_file_does_not_fall_back(tmp_path):
    user = tmp_path / "user.json"
    user.write_text("{broken", encoding="utf-8")
    backup = tmp_path / "backup.json"
    backup.write_text(json.dumps(DOCUMENT), encoding="utf-8")
    manager = ConfigurationManager(user, backup_file_path=backup)
    with pytest.raises(ConfigParseError):
        manager.parse_config_file()


def test_legacy_test_mode_overrides_language_and_dir(tmp_path):
    path = tmp_path / "user.json"
    path.write_text(json.dumps(DOCUMENT), encoding="utf-8")
    manager = ConfigurationManager(path, legacy_siren_test=True)
    config = manager.parse_config_file()
    assert config.alg_config.alg_lan is Language.ZH
    assert config.alg_config.alg_legacy_dir == "/system/workdir_cn"