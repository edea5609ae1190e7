from rollout.models import Feature

# For the feature "example":
#   75% < team 1 < 100%
#   25% < team 2 < 50%
#    0% < team 3 < 25%


def test_new_feature():
    f = Feature("example")

    assert f.name == "example"
    assert f.percentage == 0
    assert f.team_ids == set()
    assert not f.is_active()


def test_features_do_not_share_state():
    a, b = Feature("a"), Feature("b")
    a.activate_team(1)

    assert b.team_ids == set()
    assert a.lock is not b.lock


def test_enable_disable_team():
    f = Feature("example")
    assert not f.is_team_active(1)

    f.activate_team(1)
    f.activate_team(2)

    assert f.is_team_active(1)
    assert f.is_team_active(2)
    assert not f.is_team_active(3)

    f.deactivate_team(1)

    assert not f.is_team_active(1)
    assert f.is_team_active(2)


def test_deactivate_unknown_team_is_noop():
    f = Feature("example")
    f.deactivate_team(42)
    assert f.team_ids == set()


def test_enable_disable_feature():
    f = Feature("example")
    assert not f.is_team_active(1)

    f.activate()
    assert f.is_active()
    assert f.is_team_active(1)
    assert f.is_team_active(999999999999)

    f.deactivate()
    assert not f.is_active()
    assert not f.is_team_active(1)
    assert not f.is_team_active(99999999999)


def test_deactivate_clears_teams_and_percentage():
    f = Feature("example", 60, {1, 2, 3})
    f.deactivate()

    assert f.percentage == 0
    assert f.team_ids == set()
    for team_id in range(100):
        assert not f.is_team_active(team_id)
        assert not f.is_team_active(team_id, randomize=True)


def test_is_active_ignores_teams():
    f = Feature("example", 99, set(range(100)))
    assert not f.is_active()

    f.activate_percentage(100)
    f.team_ids = set()
    assert f.is_active()


def test_rollout():
    f = Feature("example")

    assert not f.is_team_active(1)
    assert not f.is_team_active(2)
    assert not f.is_team_active(3)

    f.activate_percentage(25)

    assert not f.is_team_active(1)
    assert not f.is_team_active(2)
    assert f.is_team_active(3)

    f.activate_percentage(50)

    assert not f.is_team_active(1)
    assert f.is_team_active(2)
    assert f.is_team_active(3)

    f.activate_percentage(75)

    assert not f.is_team_active(1)
    assert f.is_team_active(2)
    assert f.is_team_active(3)

    f.activate_percentage(100)

    assert f.is_team_active(1)
    assert f.is_team_active(2)
    assert f.is_team_active(3)


def test_rollout_and_team_mix():
    f = Feature("example")

    f.activate_team(1)
    f.activate_percentage(25)

    assert f.is_team_active(1)
    assert not f.is_team_active(2)
    assert f.is_team_active(3)


def test_team_override_survives_lower_percentage():
    f = Feature("example")
    f.activate_team(1)
    f.activate_percentage(50)
    f.activate_percentage(0)

    assert f.is_team_active(1)
    assert not f.is_team_active(2)


def test_removing_team_does_not_suppress_global_on():
    f = Feature("example")
    f.activate_team(1)
    f.activate()
    f.deactivate_team(1)

    assert f.is_team_active(1)


def test_randomized_mode_global_on():
    f = Feature("example")
    f.activate()
    assert all(f.is_team_active(t, randomize=True) for t in range(20))


def test_randomized_mode_override_wins(monkeypatch):
    monkeypatch.setattr("rollout.services.bucketing.random.randrange", lambda n: 99)
    f = Feature("example", 50, {7})

    assert f.is_team_active(7, randomize=True)
    assert not f.is_team_active(8, randomize=True)
