# -- Spatial Hash Grid for Neighbor Search -- #

'''
Uniform hash grid for neighbor search in 2D SPH.

Divides the plane into square cells whose size equals the smoothing
radius h. A particle's candidate neighbors are the particles in its
own cell and the 8 surrounding cells, a superset of the particles
within h. Candidates beyond h are rejected later by the kernels'
compact support.

Cell keys use truncation toward zero, int(x / cellSize), not floor.
For negative coordinates this folds (-cellSize, cellSize) into cell
0, so the 3x3 block is only guaranteed to cover every neighbor within
h when coordinates are non-negative. The wall margin keeps particles
inside the positive quadrant.

The grid is rebuilt from scratch every step. Bucket lists are kept
between rebuilds and only emptied, so a rebuild does not reallocate
the dict.

References:
-----------
Teschner et al. (2003) -- Optimized Spatial Hashing for Collision
    Detection of Deformable Objects
Ihmsen et al. (2011) -- Parallel Neighbor-Search for SPH

Sean Bowman [02/12/2026]
'''

from __future__ import annotations

from typing import Protocol

import numpy as np


# 3x3 block visited by nearby(), rows outer and columns inner
NEIGHBOR_OFFSETS: tuple[tuple[int, int], ...] = tuple(
    (dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1)
)

# Forward half of the 3x3 block, each cell pair visited once
HALF_STENCIL: tuple[tuple[int, int], ...] = ((1, -1), (1, 0), (1, 1), (0, 1))


#--------------------------------------------------------------------#
# -- Neighbor Search Protocol -- #
#--------------------------------------------------------------------#

class NeighborSearch(Protocol):
    '''Protocol for neighbor search structures.'''

    def insert(self, positions: np.ndarray) -> None:
        '''Rebuild the structure from particle positions.'''
        ...

    def nearby(self, position: np.ndarray) -> np.ndarray:
        '''Candidate neighbor indices of a point.'''
        ...


#--------------------------------------------------------------------#
# -- Spatial Hash Grid -- #
#--------------------------------------------------------------------#

class SpatialHashGrid:
    '''
    Uniform hash grid mapping integer cell keys to particle indices.

    After insert(), every particle index appears in exactly one
    bucket, and indices within a bucket are in ascending order.

    Parameters:
    -----------
    cellSize : float
        Grid cell size [px], equal to the smoothing radius
    '''

    def __init__(self, cellSize: float) -> None:
        if cellSize <= 0.0:
            raise ValueError(f'cellSize must be positive, got {cellSize}')

        self._cellSize = cellSize
        self._cells: dict[tuple[int, int], list[int]] = {}
        self._positions: np.ndarray | None = None

    @property
    def cellSize(self) -> float:
        '''Grid cell size [px].'''
        return self._cellSize

    @property
    def nCells(self) -> int:
        '''Number of non-empty cells.'''
        return sum(1 for bucket in self._cells.values() if bucket)

    @property
    def nParticles(self) -> int:
        '''Number of particle indices currently held.'''
        return sum(len(bucket) for bucket in self._cells.values())

    def cellKey(self, position: np.ndarray) -> tuple[int, int]:
        '''
        Integer cell coordinates of a point.

        Parameters:
        -----------
        position : np.ndarray
            Point [px], shape (2,)

        Returns:
        --------
        tuple[int, int] : (int(x / cellSize), int(y / cellSize))
        '''
        return (int(position[0] / self._cellSize), int(position[1] / self._cellSize))

    def bucket(self, key: tuple[int, int]) -> list[int]:
        '''Copy of the indices stored in cell `key` (empty if none).'''
        return list(self._cells.get(key, ()))

    ######################################################################
    # -- Build -- #
    ######################################################################

    def clear(self) -> None:
        '''Empty every bucket, keeping the bucket lists for reuse.'''
        for bucket in self._cells.values():
            bucket.clear()
        self._positions = None

    def insert(self, positions: np.ndarray) -> None:
        '''
        Clear the grid and bin every particle by its cell key.

        Parameters:
        -----------
        positions : np.ndarray
            Particle positions [px], shape (N, 2)
        '''
        self.clear()

        # astype(int) truncates toward zero, matching cellKey()
        cellIndices = (positions / self._cellSize).astype(np.int64)

        cells = self._cells
        for i, (cx, cy) in enumerate(cellIndices.tolist()):
            key = (cx, cy)
            bucket = cells.get(key)
            if bucket is None:
                bucket = cells[key] = []
            bucket.append(i)

        self._positions = positions

    ######################################################################
    # -- Queries -- #
    ######################################################################

    def nearby(self, position: np.ndarray) -> np.ndarray:
        '''
        Candidate neighbors of a point: the 3x3 block of buckets.

        The result is the concatenation of the buckets centered on the
        point's own cell, rows from -1 to +1 and within each row columns
        from -1 to +1. It includes the particle itself when the point is
        a particle position, and may include particles farther than h.

        Parameters:
        -----------
        position : np.ndarray
            Query point [px], shape (2,)

        Returns:
        --------
        np.ndarray : Particle indices, dtype int64
        '''
        cx, cy = self.cellKey(position)
        cells = self._cells

        ids: list[int] = []
        for dx, dy in NEIGHBOR_OFFSETS:
            bucket = cells.get((cx + dx, cy + dy))
            if bucket:
                ids.extend(bucket)

        return np.array(ids, dtype=np.int64)

    def queryPairs(self, radius: float) -> tuple[np.ndarray, np.ndarray]:
        '''
        Find all unique particle pairs (i, j) with |r_i - r_j| <= radius.

        Uses half-stencil traversal so each pair is found exactly once.
        Distance checks are vectorized with NumPy broadcasting per
        cell-pair group. radius should not exceed the cell size.

        Parameters:
        -----------
        radius : float
            Search radius [px]

        Returns:
        --------
        tuple[np.ndarray, np.ndarray] :
            (iIndices, jIndices) with iIndices < jIndices element-wise
        '''
        empty = (np.array([], dtype=np.int64), np.array([], dtype=np.int64))
        if self._positions is None:
            return empty

        radiusSq = radius * radius
        positions = self._positions
        iChunks: list[np.ndarray] = []
        jChunks: list[np.ndarray] = []

        for (cx, cy), bucket in self._cells.items():
            if not bucket:
                continue

            cellParticles = np.array(bucket, dtype=np.int64)
            cellPos = positions[cellParticles]

            # --- Pairs within the same cell --- #
            nCell = len(cellParticles)
            if nCell > 1:
                diff = cellPos[:, np.newaxis, :] - cellPos[np.newaxis, :, :]
                distSq = np.sum(diff * diff, axis=2)

                rowIdx, colIdx = np.triu_indices(nCell, k=1)
                within = distSq[rowIdx, colIdx] <= radiusSq
                if np.any(within):
                    iChunks.append(cellParticles[rowIdx[within]])
                    jChunks.append(cellParticles[colIdx[within]])

            # --- Pairs with forward neighbor cells --- #
            for dx, dy in HALF_STENCIL:
                neighborBucket = self._cells.get((cx + dx, cy + dy))
                if not neighborBucket:
                    continue

                neighborParticles = np.array(neighborBucket, dtype=np.int64)
                neighborPos = positions[neighborParticles]

                diff = cellPos[:, np.newaxis, :] - neighborPos[np.newaxis, :, :]
                distSq = np.sum(diff * diff, axis=2)

                localI, localJ = np.nonzero(distSq <= radiusSq)
                if len(localI) > 0:
                    iChunks.append(cellParticles[localI])
                    jChunks.append(neighborParticles[localJ])

        if not iChunks:
            return empty

        iAll = np.concatenate(iChunks)
        jAll = np.concatenate(jChunks)

        # Order each pair as i < j
        return (np.minimum(iAll, jAll), np.maximum(iAll, jAll))
