import hashlib

import pytest

from tapolight.cipher import TapoCipher, auth_hash, pkcs7_pad
from tapolight.protocol import DEFAULT_LOCAL_SEED, TapoProtocol

USERNAME = "user@example.com"
PASSWORD = "password"
REMOTE_SEED = bytes(range(100, 116))


class FakeDevice:
    def __init__(self, remote_seed=REMOTE_SEED, reply=b'{"error_code":0}'):
        self.remote_seed = remote_seed
        self.reply = reply
        self.posts = []
        self.local_seed = None
        self.cipher = None
        self.received = []

    def post(self, path, data):
        self.posts.append((path, bytes(data)))
        auth = auth_hash(USERNAME, PASSWORD)
        if path == "/handshake1":
            self.local_seed = bytes(data)
            server_hash = hashlib.sha256(self.local_seed + self.remote_seed + auth).digest()
            return self.remote_seed + server_hash
        if path == "/handshake2":
            self.cipher = TapoCipher(self.local_seed, self.remote_seed, auth)
            return b""
        response = self.cipher.encrypt(pkcs7_pad(self.reply))
        self.received.append(self.cipher.decrypt(data))
        return response


def make_protocol(device=None):
    device = device or FakeDevice()
    password = PASSWORD
    return TapoProtocol(device, USERNAME, password=password, local_seed=DEFAULT_LOCAL_SEED), device


def test_handshake_posts_in_order():
    protocol, device = make_protocol()
    protocol.handshake()
    assert [path for path, _ in device.posts] == ["/handshake1", "/handshake2"]
    assert device.posts[0][1] == DEFAULT_LOCAL_SEED
    assert len(device.posts[1][1]) == 32
    assert protocol.remote_seed == REMOTE_SEED


def test_handshake2_payload_depends_on_remote_seed():
    first, first_device = make_protocol()
    first.handshake()
    again, again_device = make_protocol()
    again.handshake()
    other, other_device = make_protocol(FakeDevice(remote_seed=bytes(16)))
    other.handshake()
    assert first_device.posts[1][1] == again_device.posts[1][1]
    assert first_device.posts[1][1] != other_device.posts[1][1]


def test_send_before_handshake_raises():
    protocol, _ = make_protocol()
    with pytest.raises(RuntimeError):
        protocol.send('{"method":"get_device_info"}')


def test_send_round_trip():
    protocol, device = make_protocol(FakeDevice(reply=b'{"error_code":0,"result":{}}'))
    protocol.handshake()
    command = '{"method":"set_device_info", "params":{"brightness":50}}'
    result = protocol.send(command)
    assert result == b'{"error_code":0,"result":{}}'
    assert device.received[0] == pkcs7_pad(command.encode())


def test_send_path_carries_sequence_number():
    protocol, device = make_protocol()
    protocol.handshake()
    start = protocol.cipher.seq
    protocol.send("{}")
    protocol.send("{}")
    paths = [path for path, _ in device.posts[2:]]
    assert paths == [f"/request?seq={start + 1}", f"/request?seq={start + 2}"]


def test_request_body_is_signature_plus_blocks():
    protocol, device = make_protocol()
    protocol.handshake()
    protocol.send("x" * 20)
    body = device.posts[-1][1]
    assert len(body) == 32 + 32
    assert (len(body) - 32) % 16 == 0


def test_short_handshake1_response_raises():
    class ShortDevice(FakeDevice):
        def post(self, path, data):
            return b"\x00" * 4

    protocol, _ = make_protocol(ShortDevice())
    with pytest.raises(ValueError):
        protocol.handshake()
    assert protocol.cipher is None


def test_bad_local_seed_length_raises():
    password = PASSWORD
    with pytest.raises(ValueError):
        TapoProtocol(FakeDevice(), USERNAME, password=password, local_seed=b"short")