"""Tests for the synchronous solver driver."""

import pytest

from labyrinth.environments import EngineEnvironment
from labyrinth.solver import driver as driver_module
from labyrinth.solver.directions import Departures, Direction
from labyrinth.solver.driver import MazeSolver, MoveKind, SolveState, solve_maze
from labyrinth.solver.environment import Surroundings
from labyrinth.solver.errors import (
    EnvironmentFault,
    MoveNotConfirmedError,
    SolverError,
    UnsolvableMazeError,
)
from labyrinth.solver.selector import backtrack_candidates


CORRIDOR_MAZE = """XXXXX
XXSEX
XXXXX"""

T_MAZE = """XXXXX
XE..X
XX.XX
XXSXX
XXXXX"""

T_MAZE_EXIT_EAST = """XXXXX
X..EX
XX.XX
XXSXX
XXXXX"""

LOOP_MAZE = """XXXX
XS.X
XE.X
XXXX"""

UNSOLVABLE_MAZE = """XXXXX
XS.XE
XXXXX"""


def _directions(result):
    return [move.direction for move in result.moves]


def _assert_each_edge_once(result):
    edges = [(move.origin, move.direction) for move in result.moves]
    assert len(edges) == len(set(edges))


class TestScenarios:
    """Small hand-checked mazes."""

    def test_corridor_takes_one_move(self):
        """Test that a corridor with a wall behind leads straight to the exit."""
        env = EngineEnvironment.from_text(CORRIDOR_MAZE)
        result = MazeSolver().solve(env)

        assert result.state == SolveState.AT_EXIT
        assert _directions(result) == [Direction.EAST]
        assert result.position == (0, 1)
        assert env.is_at_exit()

    def test_corridor_exit_on_the_other_side(self):
        """Test the mirrored corridor."""
        env = EngineEnvironment.from_text("XXXXX\nXESXX\nXXXXX")
        result = MazeSolver().solve(env)

        assert _directions(result) == [Direction.WEST]
        assert result.position == (0, -1)

    def test_t_maze_backtracks_once_out_of_dead_end(self):
        """Test that the dead-end arm is explored, left once, then the exit found."""
        env = EngineEnvironment.from_text(T_MAZE)
        result = MazeSolver().solve(env)

        assert result.reached_exit
        assert _directions(result) == [
            Direction.NORTH,
            Direction.NORTH,
            Direction.EAST,   # dead end
            Direction.WEST,   # backtrack
            Direction.WEST,   # exit arm
        ]
        assert result.backtracks == 1
        assert [move.kind for move in result.moves].count(MoveKind.BACKTRACK) == 1
        assert result.steps <= 2 * env.engine.passage_count()

    def test_t_maze_straight_to_exit(self):
        """Test that the exit arm found first is taken without backtracking."""
        env = EngineEnvironment.from_text(T_MAZE_EXIT_EAST)
        result = MazeSolver().solve(env)

        assert _directions(result) == [Direction.NORTH, Direction.NORTH, Direction.EAST]
        assert result.backtracks == 0

    def test_loop_reaches_exit_without_reusing_edges(self):
        """Test that a 4-cycle does not trap the solver."""
        env = EngineEnvironment.from_text(LOOP_MAZE)
        result = MazeSolver().solve(env)

        assert result.reached_exit
        assert _directions(result) == [Direction.EAST, Direction.SOUTH, Direction.WEST]
        _assert_each_edge_once(result)

    def test_unsolvable_maze_fails_instead_of_looping(self):
        """Test that exhausting the reachable region is a reported failure."""
        env = EngineEnvironment.from_text(UNSOLVABLE_MAZE)
        solver = MazeSolver()

        with pytest.raises(UnsolvableMazeError) as exc_info:
            solver.solve(env)

        error = exc_info.value
        assert error.position == (0, 0)
        assert error.neighbour_records == {Direction.EAST: Departures.WEST}
        assert "(0, 0)" in str(error)
        assert solver.state == SolveState.FAILED
        assert "No exit reachable" in solver.failure
        assert _directions(solver.result()) == [Direction.EAST, Direction.WEST]

    def test_boxed_in_start_fails_immediately(self):
        """Test a start cell with no open neighbours."""
        env = EngineEnvironment.from_text("XXXXX\nXSXEX\nXXXXX")
        solver = MazeSolver()

        with pytest.raises(UnsolvableMazeError, match="none"):
            solver.solve(env)
        assert solver.result().steps == 0

    def test_tutorial_maze(self, tutorial_maze):
        """Test the packaged tutorial maze."""
        env = EngineEnvironment.from_text(tutorial_maze)
        result = solve_maze(env)

        assert result.reached_exit
        assert result.steps <= 2 * env.engine.passage_count()


class TestDriverMechanics:
    """Tests for step ordering and state handling."""

    def test_departure_recorded_on_cell_being_left(self):
        """Test that the record is written to the origin, not the target."""
        env = EngineEnvironment.from_text(T_MAZE)
        solver = MazeSolver()

        solver.step(env)

        assert solver.position == (-1, 0)
        assert solver.ledger.record_at((0, 0)) == Departures.NORTH
        assert solver.ledger.record_at((-1, 0)) == Departures.NONE

    def test_choose_move_does_not_mutate(self):
        """Test that choosing a move leaves position and ledger alone."""
        solver = MazeSolver()
        move = solver.choose_move(Surroundings(south=True))

        assert move.direction == Direction.SOUTH
        assert move.kind == MoveKind.FORWARD
        assert move.target == (1, 0)
        assert solver.position == (0, 0)
        assert solver.ledger.departure_count == 0

    def test_finished_solver_cannot_step(self):
        """Test that a solver is single use."""
        env = EngineEnvironment.from_text(CORRIDOR_MAZE)
        solver = MazeSolver()
        solver.solve(env)

        with pytest.raises(SolverError, match="already finished"):
            solver.step(env)

    def test_unconfirmed_move_fails_the_solve(self):
        """Test that an environment which never confirms is an environment fault."""

        class SilentEnvironment(EngineEnvironment):
            def request_move(self, direction, on_complete):
                self.engine.move(self.session_id, direction)

        env = SilentEnvironment.from_text(T_MAZE)
        solver = MazeSolver()

        with pytest.raises(MoveNotConfirmedError):
            solver.solve(env)
        assert solver.state == SolveState.FAILED

    def test_move_settled_with_fault_fails_the_solve(self):
        """Test that a fault passed to the move callback is raised by the step."""

        class LosingEnvironment(EngineEnvironment):
            def request_move(self, direction, on_complete):
                on_complete(EnvironmentFault("move lost"))

        solver = MazeSolver()

        with pytest.raises(EnvironmentFault, match="move lost"):
            solver.solve(LosingEnvironment.from_text(T_MAZE))
        assert solver.state == SolveState.FAILED
        assert solver.failure == "EnvironmentFault: move lost"
        assert solver.result().steps == 1

    def test_result_to_dict(self):
        """Test the serialized solve result."""
        env = EngineEnvironment.from_text(CORRIDOR_MAZE)
        data = MazeSolver().solve(env).to_dict()

        assert data["state"] == "at_exit"
        assert data["steps"] == 1
        assert data["moves"] == [
            {"direction": "east", "kind": "forward", "from": [0, 0], "to": [0, 1]}
        ]
        assert "failure" not in data


class TestProperties:
    """Termination, edge-bound and backtrack-uniqueness over generated mazes."""

    SEEDS = range(25)

    def _solve(self, maze_text):
        env = EngineEnvironment.from_text(maze_text)
        result = MazeSolver(initial_span=1).solve(env)
        return env, result

    def test_perfect_mazes(self, maze_factory):
        """Test tree-shaped mazes of several sizes."""
        for seed in self.SEEDS:
            env, result = self._solve(maze_factory(6, 9, seed))

            assert result.reached_exit, f"seed {seed}"
            assert env.is_at_exit()
            assert result.steps <= 2 * env.engine.passage_count()
            assert result.departures == result.steps
            _assert_each_edge_once(result)

    def test_mazes_with_loops(self, maze_factory):
        """Test mazes with many cycles."""
        for seed in self.SEEDS:
            env, result = self._solve(maze_factory(8, 8, seed, loops=20))

            assert result.reached_exit, f"seed {seed}"
            assert result.steps <= 2 * env.engine.passage_count()
            _assert_each_edge_once(result)

    def test_open_rooms(self, room_factory):
        """Test fully open rooms, where every 2x2 block is a cycle."""
        for seed in self.SEEDS:
            env, result = self._solve(room_factory(7, 11, seed))

            assert result.reached_exit, f"seed {seed}"
            assert result.steps <= 2 * env.engine.passage_count()
            _assert_each_edge_once(result)

    def test_backtrack_target_is_unique(self, maze_factory, room_factory, monkeypatch):
        """Test that whenever the solver backtracks exactly one candidate exists."""
        counts = []
        original = driver_module.find_backtrack_move

        def counting_find_backtrack_move(surroundings, records, current):
            counts.append(len(backtrack_candidates(surroundings, records, current)))
            return original(surroundings, records, current)

        monkeypatch.setattr(driver_module, "find_backtrack_move", counting_find_backtrack_move)

        mazes = [maze_factory(8, 8, seed, loops=25) for seed in self.SEEDS]
        mazes += [room_factory(6, 6, seed) for seed in self.SEEDS]
        for maze_text in mazes:
            _, result = self._solve(maze_text)
            assert result.reached_exit

        assert counts, "expected some backtracking"
        assert set(counts) == {1}
