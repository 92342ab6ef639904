"""Merkle tree over a list of byte strings, hashed with SHA-256."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable
from dataclasses import dataclass


@dataclass
class MerkleNode:
    """A tree node holding its hash and, for inner nodes, its children."""

    hash: bytes
    left: MerkleNode | None = None
    right: MerkleNode | None = None

    @classmethod
    def leaf(cls, data: bytes) -> MerkleNode:
        return cls(hashlib.sha256(bytes(data)).digest())

    @classmethod
    def parent(cls, left: MerkleNode, right: MerkleNode) -> MerkleNode:
        return cls(hashlib.sha256(left.hash + right.hash).digest(), left, right)


@dataclass
class MerkleTree:
    """Merkle tree; an odd node at any level is paired with itself."""

    root: MerkleNode

    @classmethod
    def from_data(cls, data: Iterable[bytes]) -> MerkleTree:
        """Build the tree bottom-up from the given values."""
        nodes = [MerkleNode.leaf(item) for item in data]
        if not nodes:
            raise ValueError("cannot build a Merkle tree from no data")
        if len(nodes) % 2:
            nodes.append(nodes[-1])
        while len(nodes) > 1:
            nodes = [MerkleNode.parent(l, r) for l, r in zip(nodes[::2], nodes[1::2])]
            if len(nodes) % 2 and len(nodes) > 1:
                nodes.append(nodes[-1])
        return cls(nodes[0])

    @property
    def root_hash(self) -> bytes:
        return self.root.hash