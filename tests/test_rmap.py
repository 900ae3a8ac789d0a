import pytest

from roxy.rmap import RMap

U64_MAX = 2**64 - 1


def build(*ranges):
    rmap = RMap()
    for start, end in ranges:
        rmap.insert(start, end)
    return rmap


def test_new_map_is_empty():
    rmap = RMap()
    assert rmap.is_empty()
    assert len(rmap) == 0
    assert rmap.covered_blocks() == 0


@pytest.mark.parametrize(
    "ranges, expected, covered",
    [
        ([], [], 0),
        ([(100, 200)], [(100, 200)], 101),
        ([(100, 200), (300, 400)], [(100, 200), (300, 400)], 202),
        ([(100, 200), (150, 250)], [(100, 250)], 151),
        ([(100, 199), (200, 300)], [(100, 300)], 201),
        ([(100, 300), (150, 200)], [(100, 300)], 201),
        ([(150, 200), (100, 300)], [(100, 300)], 201),
        ([(100, 150), (200, 250), (300, 350), (140, 310)], [(100, 350)], 251),
        ([(100, 100)], [(100, 100)], 1),
        ([(100, 101)], [(100, 101)], 2),
        ([(100, 199)], [(100, 199)], 100),
        ([(0, 999)], [(0, 999)], 1000),
        ([(100, 200), (300, 400), (500, 600)], [(100, 200), (300, 400), (500, 600)], 303),
        ([(500, 600), (300, 400), (100, 200)], [(100, 200), (300, 400), (500, 600)], 303),
        ([(300, 400), (100, 200), (500, 600)], [(100, 200), (300, 400), (500, 600)], 303),
        (
            [(100, 110), (120, 130), (140, 150), (160, 170), (180, 190), (105, 145)],
            [(100, 150), (160, 170), (180, 190)],
            73,
        ),
        (
            [(100, 110), (120, 130), (140, 150), (160, 170), (180, 190), (105, 145), (150, 180)],
            [(100, 190)],
            91,
        ),
    ],
    ids=[
        "no_ranges",
        "single",
        "disjoint",
        "overlapping",
        "adjacent",
        "contained",
        "containing",
        "merges_multiple",
        "single_block",
        "two_blocks",
        "hundred_blocks",
        "thousand_blocks",
        "order_forward",
        "order_reverse",
        "order_mixed",
        "complex_partial_merge",
        "complex_full_merge",
    ],
)
def test_ranges_after_inserts(ranges, expected, covered):
    rmap = build(*ranges)
    assert list(rmap) == expected
    assert len(rmap) == len(expected)
    assert rmap.covered_blocks() == covered


@pytest.mark.parametrize(
    "ranges, query, expected",
    [
        ([(100, 200)], 150, True),
        ([(100, 200)], 100, True),
        ([(100, 200)], 200, True),
        ([(100, 200)], 99, False),
        ([(100, 200)], 201, False),
        ([(100, 200)], 0, False),
        ([(100, 200)], 1000, False),
        ([], 0, False),
        ([], 100, False),
        ([], U64_MAX, False),
        ([(100, 200), (300, 400)], 350, True),
        ([(100, 200), (300, 400)], 250, False),
        ([(100, 100)], 101, False),
        ([(0, 1_000_000), (2_000_000, 3_000_000)], 500_000, True),
        ([(0, 1_000_000), (2_000_000, 3_000_000)], 2_500_000, True),
        ([(0, 1_000_000), (2_000_000, 3_000_000)], 1_500_000, False),
        ([(0, 10)], 0, True),
        ([(0, 10)], 10, True),
        ([(0, 10)], 11, False),
        ([(U64_MAX - 10, U64_MAX)], U64_MAX, True),
        ([(U64_MAX - 10, U64_MAX)], U64_MAX - 5, True),
        ([(U64_MAX - 10, U64_MAX)], U64_MAX - 11, False),
    ],
)
def test_contains(ranges, query, expected):
    assert (query in build(*ranges)) is expected


@pytest.mark.parametrize(
    "ranges, start, end, expected",
    [
        ([], 100, 200, [(100, 200)]),
        ([(50, 250)], 100, 200, []),
        ([(100, 200), (300, 400)], 50, 450, [(50, 99), (201, 299), (401, 450)]),
        ([(100, 200)], 50, 200, [(50, 99)]),
        ([(100, 200)], 100, 250, [(201, 250)]),
        ([(100, 150), (200, 250)], 100, 250, [(151, 199)]),
        ([(0, 1000)], 100, 200, []),
        ([(500, 600)], 100, 200, [(100, 200)]),
        ([(100, 200)], 100, 99, []),
        ([(100, 200)], 100, 100, []),
        ([(100, 200)], 50, 50, [(50, 50)]),
        ([(0, 1_000_000), (2_000_000, 3_000_000)], 0, 3_000_000, [(1_000_001, 1_999_999)]),
    ],
)
def test_gaps_in(ranges, start, end, expected):
    assert build(*ranges).gaps_in(start, end) == expected


@pytest.mark.parametrize(
    "ranges, start, end, expected",
    [
        ([(100, 300)], 150, 250, True),
        ([(100, 300)], 100, 300, True),
        ([(100, 200)], 50, 150, False),
        ([(100, 200)], 150, 250, False),
        ([(100, 200)], 300, 400, False),
        ([(100, 200)], 200, 100, False),
    ],
)
def test_contains_range(ranges, start, end, expected):
    assert build(*ranges).contains_range(start, end) is expected


def test_clear():
    rmap = build((100, 200), (300, 400))
    rmap.clear()
    assert rmap.is_empty()
    assert rmap.covered_blocks() == 0
    assert 150 not in rmap


@pytest.mark.parametrize(
    "ranges, lowest, highest",
    [
        ([], None, None),
        ([(100, 200)], 100, 200),
        ([(100, 200), (300, 400)], 100, 400),
        ([(100, 200), (300, 400), (50, 80)], 50, 400),
    ],
)
def test_min_max_block(ranges, lowest, highest):
    rmap = build(*ranges)
    assert rmap.min_block() == lowest
    assert rmap.max_block() == highest


def test_copy_is_independent():
    rmap = build((100, 200))
    cloned = rmap.copy()
    rmap.insert(300, 400)
    assert list(cloned) == [(100, 200)]
    assert 350 not in cloned


def test_repr_names_class():
    assert "RMap" in repr(build((100, 200)))


def test_insert_invalid_range_raises():
    with pytest.raises(ValueError, match="start must be <= end"):
        RMap().insert(200, 100)


def test_gaps_and_coverage_partition_query():
    rmap = build((10, 20), (40, 45), (70, 90))
    gaps = rmap.gaps_in(0, 100)
    gap_blocks = sum(end - start + 1 for start, end in gaps)
    covered = sum(1 for block in range(0, 101) if block in rmap)
    assert gap_blocks + covered == 101
    assert gaps == [(0, 9), (21, 39), (46, 69), (91, 100)]