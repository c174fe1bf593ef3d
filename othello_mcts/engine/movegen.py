"""Bitboard move generation for Othello.

A position is two 64-bit ints, one per colour. Square 0 is A1 (the least
significant bit) and square 63 is H8; files run A-H within each byte, ranks
run 1-8 across bytes. Shifting by +-1 moves along a rank, +-8 along a file,
and the diagonals are +-7 and +-9. East-going shifts are masked with NOT_A and
west-going ones with NOT_H so runs never wrap from one rank onto the next.
"""

from __future__ import annotations

from typing import List

# Squares are numbered 0..63 with A1=0 (LSB) and H8=63 (MSB); bit = 1 << square.
FULL = 0xFFFFFFFFFFFFFFFF
NOT_A = 0xFEFEFEFEFEFEFEFE
NOT_H = 0x7F7F7F7F7F7F7F7F

# Directions in deltas: N, S, E, W, NE, NW, SE, SW
DIRS = (8, -8, 1, -1, 9, 7, -7, -9)


def _shift(bb: int, d: int) -> int:
    if d == 8:
        return (bb << 8) & FULL
    if d == -8:
        return bb >> 8
    if d == 1:
        return (bb << 1) & NOT_A & FULL
    if d == -1:
        return (bb >> 1) & NOT_H
    if d == 9:
        return (bb << 9) & NOT_A & FULL
    if d == 7:
        return (bb << 7) & NOT_H & FULL
    if d == -7:
        return (bb >> 7) & NOT_A
    if d == -9:
        return (bb >> 9) & NOT_H
    raise ValueError(f"bad direction: {d}")


def legal_moves_mask(own: int, opp: int) -> int:
    """Bitmask of empty squares where `own` captures at least one `opp` disc."""
    empty = ~(own | opp) & FULL
    moves = 0
    for d in DIRS:
        t = _shift(own, d) & opp
        # A capture run is at most 6 discs long on an 8x8 board
        t |= _shift(t, d) & opp
        t |= _shift(t, d) & opp
        t |= _shift(t, d) & opp
        t |= _shift(t, d) & opp
        t |= _shift(t, d) & opp
        moves |= _shift(t, d) & empty
    return moves


def flip_mask(own: int, opp: int, sq: int) -> int:
    """Discs flipped when `own` places on `sq`.

    Each direction contributes its run of opponent discs only if the run is
    closed by an own disc before leaving the board or reaching an empty square.
    """
    m = 1 << sq
    flips = 0
    for d in DIRS:
        run = 0
        cur = _shift(m, d)
        while cur and (cur & opp):
            run |= cur
            cur = _shift(cur, d)
        if run and (cur & own):
            flips |= run
    return flips


def squares(mask: int) -> List[int]:
    """Set bits of `mask` as square indices in ascending order."""
    out: List[int] = []
    while mask:
        lsb = mask & -mask
        out.append(lsb.bit_length() - 1)
        mask ^= lsb
    return out
