"""
dfre: WAX multi-state sprite decoder.

A WAX is a graph expressed purely as file offsets:

  header -> states (up to 32) -> per-angle sequences (32) -> frames (up to 32)
         -> cells

Header (32 bytes, then the state table):
  uint32 LE version, num_sequences, num_frames, num_cells
  uint32 LE scale_x, scale_y, extra_light, pad
  uint32 LE state_offsets[32]       (a 0 ends the table early)

State:
  uint32 LE world_width, world_height, frame_rate
  uint32 LE num_frames, pad, pad, pad
  uint32 LE sequence_offsets[32]    (one per viewing angle)

Sequence (frame table starts 16 bytes in):
  uint32 LE pad[4]
  uint32 LE frame_offsets[32]       (a 0 ends the table early)

Frame: FME frame header, then uint32 LE cell_offset.

The same sequence, frame or cell is routinely referenced from several
parents (mirrored angles share a sequence, idle states reuse frames). Each
level is folded through an OffsetIndex so every distinct offset is decoded
once and gets one arena slot; parents store arena indices.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from .binio import as_stream, read_u32, read_vec2_u32
from .constants import WAX_ANGLES, WAX_MAX_FRAMES, WAX_MAX_STATES, WAX_SEQUENCE_HEADER_SIZE
from .fme import Cell, Frame, read_cell, read_frame


class OffsetIndex:
    """Assigns arena indices to file offsets in first-seen order."""

    def __init__(self):
        self._indices: Dict[int, int] = {}

    def add(self, offset: int) -> int:
        return self._indices.setdefault(offset, len(self._indices))

    def offsets(self) -> List[int]:
        return list(self._indices)

    def __len__(self):
        return len(self._indices)


@dataclass(frozen=True)
class WaxState:
    offset: int
    world_size: Tuple[int, int]
    frame_rate: int
    angle_sequence_indices: Tuple[int, ...]


@dataclass(frozen=True)
class WaxSequence:
    offset: int
    frame_indices: Tuple[int, ...]


@dataclass(frozen=True)
class WaxFrame:
    offset: int
    frame: Frame
    cell_index: int


@dataclass(frozen=True)
class Wax:
    version: int
    num_sequences: int
    num_frames: int
    num_cells: int
    states: Tuple[WaxState, ...]
    sequences: Tuple[WaxSequence, ...]
    frames: Tuple[WaxFrame, ...]
    cells: Tuple[Cell, ...]

    def cell_for(self, state: int, angle: int, frame: int) -> Cell:
        """Cell shown for a state, viewing angle and animation step."""
        sequence = self.sequences[self.states[state].angle_sequence_indices[angle]]
        return self.cells[self.frames[sequence.frame_indices[frame]].cell_index]


def _read_offset_table(f, count: int) -> List[int]:
    offsets = []
    for _ in range(count):
        offset = read_u32(f)
        if offset == 0:
            break
        offsets.append(offset)
    return offsets


def read_wax(data) -> Wax:
    f = as_stream(data)

    version = read_u32(f)
    num_sequences = read_u32(f)
    num_frames = read_u32(f)
    num_cells = read_u32(f)
    read_u32(f)  # scale x
    read_u32(f)  # scale y
    read_u32(f)  # extra light
    read_u32(f)  # padding

    state_offsets = _read_offset_table(f, WAX_MAX_STATES)

    sequence_index = OffsetIndex()
    frame_index = OffsetIndex()
    cell_index = OffsetIndex()

    states = []
    for offset in state_offsets:
        f.seek(offset)
        world_size = read_vec2_u32(f)
        frame_rate = read_u32(f)
        for _ in range(4):
            read_u32(f)  # num frames + padding
        angles = tuple(sequence_index.add(read_u32(f)) for _ in range(WAX_ANGLES))
        states.append(WaxState(offset, world_size, frame_rate, angles))

    sequences = []
    for offset in sequence_index.offsets():
        f.seek(offset + WAX_SEQUENCE_HEADER_SIZE)
        indices = tuple(frame_index.add(o) for o in _read_offset_table(f, WAX_MAX_FRAMES))
        sequences.append(WaxSequence(offset, indices))

    frames = []
    for offset in frame_index.offsets():
        f.seek(offset)
        frame = read_frame(f)
        frames.append(WaxFrame(offset, frame, cell_index.add(read_u32(f))))

    cells = tuple(read_cell(f, offset) for offset in cell_index.offsets())

    return Wax(
        version=version,
        num_sequences=num_sequences,
        num_frames=num_frames,
        num_cells=num_cells,
        states=tuple(states),
        sequences=tuple(sequences),
        frames=tuple(frames),
        cells=cells,
    )
