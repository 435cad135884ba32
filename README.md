# tapolight

`tapolight` holds the pieces needed to talk to a Tapo smart bulb over its local
KLAP protocol. It also turns raw two-channel analogue readings into brightness
and colour-temperature values:

- `tapolight.cipher`: session key derivation, AES-CBC encryption and request signing.
- `tapolight.protocol`: the two-step handshake and encrypted command exchange.
- `tapolight.adc`: averaging of raw readings and their mapping to light settings.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Cipher

- `auth_hash(username, password)` returns SHA-256 over the SHA-1 digests of the
  username and the password. It accepts `str` or `bytes`.
- `pkcs7_pad(data)` pads data to a whole number of 16-byte blocks. It always adds
  between 1 and 16 bytes.
- `TapoCipher(local_seed, remote_seed, auth_hash)` needs two 16-byte seeds and a
  32-byte auth hash. Any other length raises `ValueError`. From these it derives
  the session `key`, `iv`, `sig` and starting `seq`.
- `TapoCipher.encrypt(data)` works on data already padded to a multiple of 16
  bytes. It advances `seq` by one and returns a 32-byte SHA-256 signature
  followed by the ciphertext.
- `TapoCipher.decrypt(data)` drops the leading 32-byte signature without
  checking it. It decrypts the rest with the current `seq` and leaves the
  padding in place.

## Protocol

`TapoProtocol(client, username, password, local_seed)` works with any object
that has a `post(path, data)` method returning the response body as `bytes`.
`local_seed` is optional and defaults to a fixed 16-byte value.

`handshake()` runs the session setup:

1. It posts the local seed to `/handshake1` and reads the remote seed from the
   first 16 bytes of the reply. The reply must hold at least 16 bytes, or
   `ValueError` is raised.
2. It posts the handshake-2 hash to `/handshake2`.
3. It creates a fresh `TapoCipher`.

A mismatch between the server hash and the locally computed hash is only logged
at debug level.

`send(command)` does the following:

1. It pads and encrypts the command.
2. It posts the result to `/request?seq=<seq>`.
3. It decrypts the reply and returns it, with valid PKCS#7 padding removed.

Calling `send` before `handshake` raises `RuntimeError`.

```python
from tapolight.protocol import TapoProtocol

password = "password"
protocol = TapoProtocol(client, "user@example.com", password, bytes(range(16)))
protocol.handshake()
reply = protocol.send('{"method":"set_device_info", "params":{"brightness":50}}')
```

## Readings

- `brightness_from_raw(raw)` divides an averaged reading by 37.
- `temperature_from_raw(raw)` maps an averaged reading linearly onto kelvin.
  Results below 2550 snap to 2500, and results above 6450 snap to 6500.
- `SampleAverager.add_conversion(samples)` takes one frame of exactly 10
  `(channel 0, channel 1)` pairs. Any other count raises `ValueError`.
  - After 249 frames it divides each channel's sum by 2500. It stores the
    results as `ch0_avg` and `ch1_avg`, returns them as a tuple, and starts a
    new window.
  - For every other frame it returns `None`.
  - The `brightness` and `temperature` properties apply the two mappings to the
    latest averages.

## What this package does not do

- It ships no HTTP client. You supply the object passed to `TapoProtocol`,
  including any session cookie handling the device needs.
- It has no command-line program.
- It has no loop that watches readings and decides when to send commands.
- It does not read hardware. Readings must be fed to `SampleAverager` by the
  caller.