# -- Spatial Hash Grid Tests -- #

'''
Bucket bookkeeping, 3x3 candidate queries, truncating cell keys, and
unique pair search of the spatial hash grid.

Sean Bowman [02/17/2026]
'''

import numpy as np
import pytest

from FluidSim.sph.neighborSearch import SpatialHashGrid

H = 16.0


@pytest.fixture
def randomPositions() -> np.ndarray:
    rng = np.random.default_rng(42)
    return np.column_stack([
        rng.uniform(5.0, 795.0, 400),
        rng.uniform(5.0, 395.0, 400),
    ])


def testEveryIndexInExactlyOneBucket(randomPositions):
    grid = SpatialHashGrid(H)
    grid.insert(randomPositions)

    seen = []
    for bucket in grid._cells.values():
        seen.extend(bucket)

    assert sorted(seen) == list(range(len(randomPositions)))
    assert grid.nParticles == len(randomPositions)


def testInsertBinsByTruncatedCell():
    grid = SpatialHashGrid(H)
    positions = np.array([[5.0, 5.0], [20.0, 5.0], [31.9, 47.0]])
    grid.insert(positions)

    assert grid.bucket((0, 0)) == [0]
    assert grid.bucket((1, 0)) == [1]
    assert grid.bucket((1, 2)) == [2]


def testCellKeyTruncatesTowardZero():
    grid = SpatialHashGrid(H)

    assert grid.cellKey(np.array([-5.0, -5.0])) == (0, 0)
    assert grid.cellKey(np.array([-17.0, 3.0])) == (-1, 0)
    assert grid.cellKey(np.array([17.0, 33.0])) == (1, 2)


def testRebuildReplacesPreviousContents():
    grid = SpatialHashGrid(H)
    grid.insert(np.array([[5.0, 5.0], [100.0, 100.0]]))
    grid.insert(np.array([[200.0, 200.0]]))

    assert grid.bucket((0, 0)) == []
    assert grid.bucket((6, 6)) == []
    assert grid.bucket((12, 12)) == [0]
    assert grid.nParticles == 1


def testClearKeepsBucketLists():
    grid = SpatialHashGrid(H)
    grid.insert(np.array([[5.0, 5.0], [100.0, 100.0]]))
    bucketsBefore = {key: id(bucket) for key, bucket in grid._cells.items()}

    grid.clear()

    assert grid.nParticles == 0
    assert grid.nCells == 0
    assert {key: id(bucket) for key, bucket in grid._cells.items()} == bucketsBefore


def testNearbyVisitsThreeByThreeBlockInOrder():
    grid = SpatialHashGrid(H)
    # One particle in each cell of the block around (5, 5), listed out of order
    centers = {
        (dx, dy): [(5 + dx) * H + 1.0, (5 + dy) * H + 1.0]
        for dy in (-1, 0, 1) for dx in (-1, 0, 1)
    }
    keys = list(centers)[::-1]
    grid.insert(np.array([centers[k] for k in keys]))

    result = grid.nearby(np.array([5 * H + 8.0, 5 * H + 8.0]))

    # Rows outer (dy), columns inner (dx)
    expectedOrder = [keys.index((dx, dy)) for dy in (-1, 0, 1) for dx in (-1, 0, 1)]
    assert result.tolist() == expectedOrder


def testNearbyIncludesSelf():
    grid = SpatialHashGrid(H)
    positions = np.array([[50.0, 50.0]])
    grid.insert(positions)

    assert grid.nearby(positions[0]).tolist() == [0]


def testNearbyExcludesDistantCells():
    grid = SpatialHashGrid(H)
    positions = np.array([[50.0, 50.0], [50.0 + 3 * H, 50.0]])
    grid.insert(positions)

    assert grid.nearby(positions[0]).tolist() == [0]


def testNearbyHasNoFalseNegatives(randomPositions):
    grid = SpatialHashGrid(H)
    grid.insert(randomPositions)

    diff = randomPositions[:, np.newaxis, :] - randomPositions[np.newaxis, :, :]
    dist = np.linalg.norm(diff, axis=2)

    for i in range(len(randomPositions)):
        candidates = set(grid.nearby(randomPositions[i]).tolist())
        trueNeighbors = set(np.nonzero(dist[i] <= H)[0].tolist())
        assert trueNeighbors <= candidates


def testQueryPairsMatchesBruteForce(randomPositions):
    grid = SpatialHashGrid(H)
    grid.insert(randomPositions)
    iIdx, jIdx = grid.queryPairs(H)

    found = set(zip(iIdx.tolist(), jIdx.tolist()))
    assert len(found) == len(iIdx)
    assert np.all(iIdx < jIdx)

    n = len(randomPositions)
    expected = set()
    for i in range(n):
        for j in range(i + 1, n):
            if np.linalg.norm(randomPositions[i] - randomPositions[j]) <= H:
                expected.add((i, j))

    assert found == expected


def testQueryPairsBeforeInsertIsEmpty():
    iIdx, jIdx = SpatialHashGrid(H).queryPairs(H)
    assert len(iIdx) == 0 and len(jIdx) == 0


def testRejectsNonPositiveCellSize():
    with pytest.raises(ValueError):
        SpatialHashGrid(0.0)
