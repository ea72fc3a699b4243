import pytest
from redis.connection import Connection

from respirator.config import DecoderConfig
from respirator.resp.decoder import RESPDecoder


@pytest.fixture
def decoder() -> RESPDecoder:
    return RESPDecoder()


@pytest.fixture
def shallow_decoder() -> RESPDecoder:
    return RESPDecoder(DecoderConfig(max_depth=3))


@pytest.fixture(scope="package")
def redis_connection():
    # pack_command never opens the socket
    connection = Connection()

    yield connection

    connection.disconnect()


@pytest.fixture
def pack_command(redis_connection):
    def pack(*args: str | bytes | int) -> bytes:
        return b"".join(redis_connection.pack_command(*args))

    return pack
