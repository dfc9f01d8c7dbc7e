import pytest

from sirenkit import vt_section as vs
from sirenkit.fields import ConfigParseError
from sirenkit.models import DefVTConfig, SirenConfig


def _full_item():
    return {
        vs.KEY_VT_TYPE: 1,
        vs.KEY_VT_WORD: "ruoqi",
        vs.KEY_VT_PHONE: "r|l|uo4 q|i2",
        vs.KEY_VT_AVG_SCORE: 4.5,
        vs.KEY_VT_MIN_SCORE: 2.25,
        vs.KEY_VT_LEFT_SIL_DET: True,
        vs.KEY_VT_RIGHT_SIL_DET: False,
        vs.KEY_VT_REMOTE_CHECK_WITH_AEC: True,
        vs.KEY_VT_REMOTE_CHECK_WITHOUT_AEC: True,
        vs.KEY_VT_LOCAL_CLASSIFY_CHECK: True,
        vs.KEY_VT_CLASSIFY_SHIELD: -0.5,
        vs.KEY_NNET_PATH: "/tmp/model.nnet",
    }


def test_parse_full_item():
    cfg = vs.parse_def_vt_config(_full_item())
    assert cfg == DefVTConfig(
        vt_type=1,
        vt_word="ruoqi",
        vt_phone="r|l|uo4 q|i2",
        vt_avg_score=4.5,
        vt_min_score=2.25,
        vt_left_sil_det=True,
        vt_right_sil_det=False,
        vt_remote_check_with_aec=True,
        vt_remote_check_without_aec=True,
        vt_local_classify_check=True,
        vt_classify_shield=-0.5,
        vt_nnet_path="/tmp/model.nnet",
    )


def test_wrong_type_for_vt_type_falls_back_to_four():
    cfg = vs.parse_def_vt_config({vs.KEY_VT_TYPE: "awake"})
    assert cfg.vt_type == vs.DEFAULT_VT_TYPE == 4


def test_wrong_kinds_reset_fields():
    item = {
        vs.KEY_VT_WORD: 5,
        vs.KEY_VT_AVG_SCORE: 3,
        vs.KEY_VT_LEFT_SIL_DET: 1,
        vs.KEY_NNET_PATH: None,
    }
    cfg = vs.parse_def_vt_config(item)
    assert cfg.vt_word == ""
    assert cfg.vt_avg_score == 0.0
    assert cfg.vt_left_sil_det is False
    assert cfg.vt_nnet_path == ""


def test_unknown_keys_ignored():
    cfg = vs.parse_def_vt_config({"something_else": 1, vs.KEY_VT_WORD: "hi"})
    assert cfg == DefVTConfig(vt_word="hi")


def test_scores_are_single_precision():
    cfg = vs.parse_def_vt_config({vs.KEY_VT_AVG_SCORE: 0.1})
    assert abs(cfg.vt_avg_score - 0.1) < 1e-7
    assert cfg.vt_avg_score != 0.1


def test_parse_def_vt_configs_skips_non_objects():
    config = SirenConfig()
    section = {vs.KEY_ALG_DEF_VT: [_full_item(), 3, "x", {vs.KEY_VT_WORD: "b"}]}
    result = vs.parse_def_vt_configs(section, config)
    assert result is config
    words = [c.vt_word for c in config.alg_config.def_vt_configs]
    assert words == ["ruoqi", "b"]


def test_parse_def_vt_configs_appends():
    config = SirenConfig()
    section = {vs.KEY_ALG_DEF_VT: [{vs.KEY_VT_WORD: "a"}]}
    vs.parse_def_vt_configs(section, config)
    vs.parse_def_vt_configs(section, config)
    assert len(config.alg_config.def_vt_configs) == 2


@pytest.mark.parametrize("section", [{}, {vs.KEY_ALG_DEF_VT: {"a": 1}}, {vs.KEY_ALG_DEF_VT: None}])
def test_parse_def_vt_configs_missing_or_mistyped(section):
    config = vs.parse_def_vt_configs(section, SirenConfig())
    assert config.alg_config.def_vt_configs == []


def test_parse_debug_config_full():
    section = {key: True for key, _ in vs._DEBUG_FLAGS}
    section[vs.KEY_DEBUG_RECORD_PATH] = "/data/rec"
    config = vs.parse_debug_config(section, SirenConfig())
    debug = config.debug_config
    assert debug.recording_path == "/data/rec"
    assert all(getattr(debug, attr) for _, attr in vs._DEBUG_FLAGS)


def test_parse_debug_config_optional_flags():
    config = SirenConfig()
    config.debug_config.bf_record = True
    section = {vs.KEY_DEBUG_BF_RECORD: "yes", vs.KEY_DEBUG_VAD_RECORD: True, vs.KEY_DEBUG_RECORD_PATH: "p"}
    vs.parse_debug_config(section, config)
    assert config.debug_config.bf_record is True
    assert config.debug_config.vad_record is True
    assert config.debug_config.aec_record is False


def test_parse_debug_config_requires_path():
    with pytest.raises(ConfigParseError):
        vs.parse_debug_config({vs.KEY_DEBUG_RS_RECORD: True}, SirenConfig())


def test_parse_debug_config_path_must_be_string():
    with pytest.raises(ConfigParseError):
        vs.parse_debug_config({vs.KEY_DEBUG_RECORD_PATH: 7}, SirenConfig())