import struct

import numpy as np

# Where each original block sits inside the shuffled data, indexed by the
# selector (EC >> 13) & 31. Selectors 24-31 repeat 0-7.
BLOCK_POSITIONS = (
    (0, 1, 2, 3), (0, 1, 3, 2), (0, 2, 1, 3), (0, 3, 1, 2),
    (0, 2, 3, 1), (0, 3, 2, 1), (1, 0, 2, 3), (1, 0, 3, 2),
    (2, 0, 1, 3), (3, 0, 1, 2), (2, 0, 3, 1), (3, 0, 2, 1),
    (1, 2, 0, 3), (1, 3, 0, 2), (2, 1, 0, 3), (3, 1, 0, 2),
    (2, 3, 0, 1), (3, 2, 0, 1), (1, 2, 3, 0), (1, 3, 2, 0),
    (2, 1, 3, 0), (3, 1, 2, 0), (2, 3, 1, 0), (3, 2, 1, 0),
    (0, 1, 2, 3), (0, 1, 3, 2), (0, 2, 1, 3), (0, 3, 1, 2),
    (0, 2, 3, 1), (0, 3, 2, 1), (1, 0, 2, 3), (1, 0, 3, 2),
)


class EntryCipher:
    """
    Stored entry cipher: LCRNG keystream XOR followed by a 4-block shuffle.

    Layout of a stored entry:
      0x00  u32  encryption constant (EC), never encrypted
      0x04  u16  sanity
      0x06  u16  checksum
      0x08  4 x 80-byte blocks, shuffled by (EC >> 13) & 31
      0x148 tail, XOR-ed but not shuffled

    Decrypt = XOR then unshuffle. Encrypt = shuffle then XOR.
    """

    LCRNG_MULT = 0x41C64E6D
    LCRNG_ADD = 0x00006073
    HEADER_SIZE = 8
    BLOCK_SIZE = 80
    BLOCK_COUNT = 4
    ENTRY_SIZE = 0x158

    def encryption_constant(self, data):
        return struct.unpack_from("<I", data, 0)[0]

    def block_order(self, ec):
        return BLOCK_POSITIONS[(ec >> 13) & 31]

    def keystream(self, seed, count):
        words = np.empty(count, dtype=np.uint16)
        for i in range(count):
            seed = (seed * self.LCRNG_MULT + self.LCRNG_ADD) & 0xFFFFFFFF
            words[i] = seed >> 16
        return words

    def crypt(self, data, seed):
        """XOR every u16 after the header with the keystream. Self-inverse."""
        count = (len(data) - self.HEADER_SIZE) // 2
        end = self.HEADER_SIZE + count * 2
        words = np.frombuffer(bytes(data[self.HEADER_SIZE:end]), dtype="<u2")
        data[self.HEADER_SIZE:end] = (words ^ self.keystream(seed, count)).astype("<u2").tobytes()

    def unshuffle(self, data, ec):
        order = self.block_order(ec)
        size = self.BLOCK_SIZE
        start = self.HEADER_SIZE
        temp = bytearray(size * self.BLOCK_COUNT)
        for b in range(self.BLOCK_COUNT):
            src = start + order[b] * size
            temp[b * size:(b + 1) * size] = data[src:src + size]
        data[start:start + len(temp)] = temp

    def shuffle(self, data, ec):
        order = self.block_order(ec)
        size = self.BLOCK_SIZE
        start = self.HEADER_SIZE
        temp = bytearray(size * self.BLOCK_COUNT)
        for b in range(self.BLOCK_COUNT):
            dst = order[b] * size
            temp[dst:dst + size] = data[start + b * size:start + (b + 1) * size]
        data[start:start + len(temp)] = temp

    def decrypt(self, data):
        """Decrypt a stored entry in place. `data` must be a bytearray."""
        ec = self.encryption_constant(data)
        self.crypt(data, ec)
        self.unshuffle(data, ec)

    def encrypt(self, data):
        ec = self.encryption_constant(data)
        self.shuffle(data, ec)
        self.crypt(data, ec)

    def checksum(self, data):
        """u16 sum over the four data blocks of a decrypted entry."""
        end = self.HEADER_SIZE + self.BLOCK_SIZE * self.BLOCK_COUNT
        words = np.frombuffer(bytes(data[self.HEADER_SIZE:end]), dtype="<u2")
        return int(words.sum(dtype=np.uint64)) & 0xFFFF

    def stored_checksum(self, data):
        return struct.unpack_from("<H", data, 6)[0]

    def is_valid(self, data):
        return self.checksum(data) == self.stored_checksum(data)
