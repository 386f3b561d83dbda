import pytest

from flvreader.astypes import ScriptDate
from flvreader.constants import *
from flvreader.scripts import debug_flv
from flvreader.tags import create_flv_header, create_flv_tag, create_script_tag, create_audio_tag, create_video_tag


@pytest.fixture
def flv_file(tmp_path):
    path = tmp_path / 'sample.flv'
    path.write_bytes(create_flv_header() +
                     create_script_tag('onMetaData', {'duration': 2.0, 'width': 320.0}) +
                     create_audio_tag(SOUND_FORMAT_AAC, b'\x12\x10', aac_packet_type=AAC_PACKET_TYPE_SEQUENCE_HEADER) +
                     create_video_tag(CODEC_ID_AVC, b'\x01\x64', avc_packet_type=AVC_PACKET_TYPE_SEQUENCE_HEADER))
    return str(path)


def test_lists_tags(flv_file, capsys):
    assert debug_flv.debug_files([flv_file])

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == '=== "%s" ===' % flv_file
    assert lines[1] == "#00001 <ScriptTag b'onMetaData' at offset 0x0000000D, time 0, size 56>"
    assert lines[2] == "{b'duration': 2.0, b'width': 320.0}"
    assert lines[3].startswith('#00002 <AudioTag at offset 0x00000054')
    assert lines[3].endswith('AAC, sequence header>')
    assert lines[4].startswith('#00003 <VideoTag')
    assert lines[4].endswith('AVC (keyframe), sequence header>')
    assert len(lines) == 5


def test_metadata_only(flv_file, capsys):
    assert debug_flv.debug_files(['--metadata', flv_file])

    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 3
    assert lines[2] == "{b'duration': 2.0, b'width': 320.0}"


def test_quiet(flv_file, capsys):
    assert debug_flv.debug_files(['-q', flv_file])
    assert capsys.readouterr().out == ''


def test_missing_file(tmp_path):
    assert not debug_flv.debug_file(str(tmp_path / 'nothing.flv'))


def test_broken_files(tmp_path, flv_file):
    not_flv = tmp_path / 'not.flv'
    not_flv.write_bytes(b'GIF89a' + b'\x00' * 20)
    truncated = tmp_path / 'truncated.flv'
    with open(flv_file, 'rb') as f:
        truncated.write_bytes(f.read()[:-3])

    assert not debug_flv.debug_file(str(not_flv))
    assert not debug_flv.debug_file(str(truncated), quiet=True)
    # one bad file spoils the whole run
    assert not debug_flv.debug_files(['-q', flv_file, str(truncated)])


def test_dates_out_of_range(tmp_path, capsys):
    path = tmp_path / 'dates.flv'
    path.write_bytes(create_flv_header() +
                     create_script_tag('onMetaData', {'creationdate': ScriptDate(float('nan')),
                                                      'lastmodified': ScriptDate(1e300, 60)}))

    assert debug_flv.debug_file(str(path))

    out = capsys.readouterr().out
    assert "b'creationdate': <ScriptDate nan ms, offset 0>" in out
    assert "b'lastmodified': <ScriptDate 1e+300 ms, offset 60>" in out


def test_nested_too_deeply(tmp_path, capsys):
    path = tmp_path / 'nested.flv'
    path.write_bytes(create_flv_header() +
                     create_flv_tag(TAG_TYPE_SCRIPT, b'\x0a\x00\x00\x00\x01' * 10000 + b'\x05'))

    assert not debug_flv.debug_file(str(path))
    assert capsys.readouterr().out == '=== "%s" ===\n' % path


def test_strict(tmp_path):
    path = tmp_path / 'stream-id.flv'
    # a tag with a StreamID of 1
    path.write_bytes(create_flv_header() + b'\x08\x00\x00\x01\x00\x00\x00\x00\x00\x00\x01\x2b\x00\x00\x00\x0c')

    assert debug_flv.debug_file(str(path), quiet=True)
    assert not debug_flv.debug_file(str(path), quiet=True, strict=True)


def test_main_exit_status(flv_file, monkeypatch):
    monkeypatch.setattr('sys.argv', ['debug-flv', '-q', flv_file])
    with pytest.raises(SystemExit) as e:
        debug_flv.main()
    assert e.value.code == 0

    monkeypatch.setattr('sys.argv', ['debug-flv', '-q', flv_file + '.missing'])
    with pytest.raises(SystemExit) as e:
        debug_flv.main()
    assert e.value.code == 1
