# sirenkit

Support code for a microphone-array voice front end:

- **Configuration** (`sirenkit.config`, `sirenkit.models`) — reads the JSON
  document that describes the microphones, the signal-processing algorithm
  settings, the default wake words and the debug recording switches, and
  fills a `SirenConfig` dataclass with it.
- **Messages** (`sirenkit.message`) — a small framed format (the four bytes
  `aabb`, a message id and a payload length, little-endian) used between
  processes, plus a packed encoding for lists of wake words.
- **Channels** (`sirenkit.channel`) — a connected pair of local stream
  sockets with a reader end and a writer end that exchange those messages.
- **UDP monitoring** (`sirenkit.net`) — an agent that broadcasts datagrams
  to, and receives datagrams on, a monitor port.

Errors are raised as exceptions; every failure the modules detect has its
own exception class.

## Loading a configuration

The document has three top-level objects: `basic_config`, `alg_config` and
`debug_config`. Each required key must be present with the right JSON type
(an integer is not accepted where a floating-point number is expected);
otherwise `ConfigParseError` is raised. A few keys are optional:
`alg_bf_scaling` (defaults to 1.0), the `alg_def_vt` wake-word list and the
debug recording flags.

```python
from pathlib import Path

from sirenkit.config import load_config_from_json
from sirenkit.fields import ConfigError

try:
    config = load_config_from_json(Path("blacksiren.json").read_text())
except ConfigError as err:
    print(f"bad configuration: {err}")
else:
    print(config.mic_num, config.mic_sample_rate, config.alg_config.alg_lan)
```

`load_config_from_json(contents, config)` fills and returns the given
`SirenConfig`, or a new one when `config` is omitted. The sections can also
be parsed one by one with `parse_basic_config`, `parse_alg_config`,
`parse_def_vt_configs` and `parse_debug_config`.

`ConfigurationManager(config_file_path, backup_file_path=..., legacy_siren_test=False, legacy_dir=...)`
applies the lookup order of the running service. `parse_config_file()`
reads the given path first; if there is no path or it cannot be read, the
backup file (by default `/etc/blacksiren.json`) is used instead. It raises
`ConfigOpenError` when neither file can be read and `ConfigParseError` when
the file that was read is invalid. With `legacy_siren_test=True` the
language is forced to Chinese and the legacy directory to `legacy_dir`.

## Wake-word messages

A list of `VTWord` objects travels as a single message:

```python
from sirenkit.message import Message, message_from_vt_words, vt_words_from_message
from sirenkit.models import VTAlgConfig, VTWord

words = [VTWord("hello", "h e l l o", vt_type=1, alg_config=VTAlgConfig(vt_block_avg_score=0.5))]
frame = message_from_vt_words(words).encode()

received = vt_words_from_message(Message.decode(frame))
print(received[0].vt_word, received[0].alg_config.vt_block_avg_score)
```

Decoded words have `use_default_config` set to `False`, and their scores
come back rounded to 32-bit floats. `Message.decode_header()` checks the
magic and returns the id and payload length; malformed data raises
`MessageError`.

## Channels

```python
from sirenkit.channel import SocketChannel
from sirenkit.message import Message

with SocketChannel() as channel:
    writer, reader = channel.writer(), channel.reader()
    writer.prepare()
    reader.prepare()
    writer.write_message(Message(7, b"payload"))
    print(reader.poll_message(timeout=1.0))
```

`SocketChannel(rmem, wmem)` applies the buffer sizes when both are non-zero;
`buffer_sizes()` reports the sizes in effect. `poll_message()` returns
`None` when the timeout passes, raises `ChannelNotPreparedError` on an
unprepared end and `ChannelMagicError` when a frame header is malformed.
`SocketWriter.write_message()` may be called from several threads.

## UDP monitoring

`UDPAgent(port, message_size=4096, broadcast_address="255.255.255.255", timeout=None)`:
`prepare_recv()` binds to the port on all interfaces, `prepare_send()` sets
up a broadcast socket, `poll_message()` returns the next datagram (up to
`message_size` bytes) and `send_message(payload)` returns the number of
bytes sent, or 0 if sending failed. Setup and receive failures raise
`NetError`. The agent is a context manager; `close()` closes both sockets.

## What this package does not do

It does not process audio: there is no echo cancellation, beamforming,
voice-activity detection or wake-word recognition here, only the
configuration and messaging around them. It does not fetch configuration
from the network (`ConfigurationManager.update_config_file()` always
returns `False`), and it provides no command-line program.

## Requirements

Python 3.10 or later on a POSIX system. No third-party packages are needed
at run time; the tests use pytest.