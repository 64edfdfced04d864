from database.seeders import HOF_POINTS, compute_hall_of_fame, compute_positions


def _players(*values):
    return [{"stats": {"mined": {"stone": v}}} for v in values]


def test_positions_rank_by_value():
    positions = compute_positions(_players(10, 30, 20))
    assert positions[(1, "mined", "stone")] == 1
    assert positions[(2, "mined", "stone")] == 2
    assert positions[(0, "mined", "stone")] == 3


def test_tied_values_share_a_place():
    positions = compute_positions(_players(50, 50, 10))
    assert [positions[(i, "mined", "stone")] for i in range(3)] == [1, 1, 3]


def test_columns_are_ranked_independently():
    players = [
        {"stats": {"mined": {"stone": 5}, "killed": {"zombie": 1}}},
        {"stats": {"mined": {"stone": 1}, "killed": {"zombie": 9}}},
    ]
    positions = compute_positions(players)
    assert positions[(0, "mined", "stone")] == 1
    assert positions[(1, "killed", "zombie")] == 1
    assert positions[(0, "killed", "zombie")] == 2


def test_hall_of_fame_points():
    players = _players(*range(7, 0, -1))
    scores = compute_hall_of_fame(compute_positions(players), len(players))
    assert scores == [HOF_POINTS[1], HOF_POINTS[2], HOF_POINTS[3], HOF_POINTS[4], HOF_POINTS[5], 0, 0]
    assert scores[:5] == [10, 5, 3, 2, 1]


def test_hall_of_fame_sums_over_columns():
    players = [
        {"stats": {"mined": {"stone": 5, "dirt": 5}, "custom": {"jump": 1}}},
        {"stats": {"mined": {"stone": 1}, "custom": {"jump": 2}}},
        {"stats": {}},
    ]
    assert compute_hall_of_fame(compute_positions(players), 3) == [10 + 10 + 5, 5 + 10, 0]
