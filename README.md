# lagrangekit

Building blocks for a QQ NT protocol client: chat message elements and the
messages that carry them, a big-endian packet builder and reader with
optional TEA encryption, a schema-less protobuf encoder, and small helpers
for hashing, AES-GCM, compression, audio and image probing, P-256 key
exchange and TCP latency checks.

## Install

```
pip install lagrangekit
```

To run the test suite:

```
pip install "lagrangekit[test]"
pytest
```

## Message elements and messages

`lagrangekit.elements` holds the element dataclasses (`TextElement`,
`AtElement`, `FaceElement`, `ReplyElement`, `ImageElement`, `VoiceElement`,
`ShortVideoElement`, `FileElement`, `LightAppElement`, `XMLElement`,
`ForwardMessage`, `MarketFaceElement`) and their constructors.
`lagrangekit.messages` holds `PrivateMessage`, `GroupMessage`,
`TempMessage`, `SendingMessage`, `Sender`, `GroupEssenceMessage` and
`Source`, plus readable-text helpers.

```python
from lagrangekit.elements import new_text, new_at, new_face, new_dice
from lagrangekit.messages import SendingMessage, to_readable_string

msg = SendingMessage()
msg.append(new_at(0))            # display "@全体成员"
msg.append(new_text(" hello"))
msg.append(new_face(14))
msg.append(new_dice(3))

print(to_readable_string(msg.elements))   # "@全体成员 hello[表情][表情]"
```

Images, voice records, videos and files can be made from bytes, open
seekable streams or paths (`new_image`, `new_stream_record`,
`new_file_video`, `new_local_file`, ...). Their MD5, SHA-1 and size are
computed when the element is made; a voice element takes its duration from
an AMR or SILK header when one is recognised, and a video thumbnail takes
its width and height from the image, falling back to 1920x1080.

`ForwardMessage.light_app_content()` returns the JSON card for a forwarded
message and `to_light_app()` wraps it in a `LightAppElement`.
`MultiMessage.parse()` reads the `<msg>` XML card of a stored forward.

## Packets

```python
from lagrangekit.builder import Builder
from lagrangekit.reader import Reader

packet = Builder().write_u16(0x0102).write_len_string("hello").pack(0x2333)

reader = Reader(packet)
tag = reader.read_u16()                                 # 0x2333
body = reader.read_bytes_with_length("u16", False)
```

A `Builder` created with a 16-byte key encrypts its contents with TEA
(`lagrangekit.tea.TeaCipher`) in `to_bytes` and `pack`. `Reader` returns
zero or empty values when data runs out, except `read_byte` and the varint
readers, which raise `EOFError`. `Reader.from_stream` reads from a file-like
object and `NetworkReader` reads exact amounts from a socket.

## Dynamic protobuf

```python
from lagrangekit.dynamic import DynamicMessage, SInt

DynamicMessage({1: 2, 3: "text", 4: SInt(-1)}).encode()
```

Fields are written in field-number order. `SInt`, `SInt32` and `SInt64` are
zigzag encoded, `Float32` is a 32-bit fixed value, other floats 64-bit;
strings, bytes and nested messages are length-delimited and lists of
integers become repeated varints.

## Other helpers

- `lagrangekit.hashing` – MD5, SHA-1 and SHA-256 digests, stream hashing,
  per-block SHA-1 states (`compute_block_sha1`), `random_bytes`, `rand_u32`.
- `lagrangekit.aes` – `aes_gcm_encrypt` / `aes_gcm_decrypt` with a random
  12-byte nonce in front of the ciphertext.
- `lagrangekit.compress` – zlib and gzip helpers, `uint32_to_ipv4_address`.
- `lagrangekit.audio` – `decode` recognises AMR and SILK v3 data and
  estimates the duration.
- `lagrangekit.image` – `image_resolve` returns an `ImageFormat` and
  `ImageSize`.
- `lagrangekit.ecdh` – `p256()` returns an `Exchanger` holding a fresh
  P-256 key pair and its shared secret with the login server's public key.
- `lagrangekit.tcping` – `run_tcp_ping_loop` reports losses and mean
  connect time over several attempts.
- `lagrangekit.ioutil` – UUIDs, trace ids, timestamps, hex parsing and a
  `StringInterner`.
- `lagrangekit.logutil` – a `Logger` with a `dump` method that writes raw
  data to a timestamped file, `get_caller`, and `system` / `version` for
  the operating system and architecture.

## What this package does not do

It is a toolkit, not a client. It has no login, no connection to the chat
servers, no event loop and no command to run. Elements are plain data:
there is no conversion of elements or messages to or from the protocol's
wire messages, and no upload of images, voice, video or files.