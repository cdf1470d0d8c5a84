"""
Season engine: Flask app.
JSON API over the engine: careers live in numbered save slots, every human
action loads the slot, runs one engine call and saves the committed result.
"""
import logging
import random
import threading
from typing import Callable

from flask import Flask, jsonify, request, Response, stream_with_context

from models import SeasonState, TickResult
from db import get_connection, init_db, save_snapshot, load_snapshot, list_saves, delete_save, get_transfer_history
from generation import generate_league, scouting_report
from simulation import (
    EngineError,
    UnknownEntityError,
    CareerOverError,
    simulate_week,
    commit,
    counter_offer,
    add_to_transfer_list,
    add_to_loan_list,
    remove_from_lists,
    release_player,
    accept_offer,
    reject_offer,
    toggle_favorite,
    renew_contract,
    start_stadium_expansion,
    accept_sponsor_offer,
    reject_sponsor_offer,
    attempt_persuasion,
    acknowledge_retirements,
    accept_manager_offer,
    decline_manager_offers,
    start_new_season,
    get_transfer_windows,
    is_window_open,
)
from simulation.rewards import rank_clubs

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config.from_mapping(
    SECRET_KEY="dev-secret-change-in-production",
    ENGINE_SEED=20250801,
)
app.config.from_prefixed_env()

# Serialize every state write so spam-clicking cannot run two ticks on the same save (prevents week skips)
_sim_week_lock = threading.Lock()

# Slot -> cancel flag for a running season simulation; checked only between ticks
_cancel_flags: dict[int, threading.Event] = {}


def _connection():
    conn = get_connection()
    init_db(conn)
    return conn


def _rng(state: SeasonState, action: str) -> random.Random:
    """Deterministic per save, week and action so replays reproduce."""
    seed = app.config["ENGINE_SEED"]
    return random.Random(f"{seed}:{state.season_label}:{state.current_week}:{state.id_counter}:{action}")


def _load(conn, slot: int) -> SeasonState:
    state = load_snapshot(conn, slot)
    if state is None:
        raise UnknownEntityError("save slot", str(slot))
    return state


def _response(result: TickResult, status_ok: int = 200):
    body = result.to_dict()
    body["current_week"] = result.state.current_week
    body["season_label"] = result.state.season_label
    return jsonify(body), (status_ok if result.ok else 400)


def _run_action(slot: int, action: Callable[[SeasonState], TickResult], committed: bool = False):
    """Load, act, commit and save; refused actions leave the slot untouched.

    Ticks come back from the engine already committed; pass ``committed`` so
    their records and mail are not appended twice.
    """
    with _sim_week_lock:
        conn = _connection()
        try:
            state = _load(conn, slot)
            result = action(state)
            if result.ok:
                if not committed:
                    commit(result)
                save_snapshot(conn, result.state, slot)
        finally:
            conn.close()
    return _response(result)


def _json_int(name: str) -> int:
    data = request.get_json(silent=True) or {}
    try:
        return int(data[name])
    except (KeyError, TypeError, ValueError):
        raise ValueError(f"'{name}' must be an integer")


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------

@app.errorhandler(UnknownEntityError)
def handle_unknown_entity(err: UnknownEntityError):
    return jsonify({"error": str(err), "kind": err.kind, "id": err.entity_id}), 404


@app.errorhandler(CareerOverError)
def handle_career_over(err: CareerOverError):
    return jsonify({"error": str(err), "game_over": True}), 409


@app.errorhandler(EngineError)
def handle_engine_error(err: EngineError):
    return jsonify({"error": str(err)}), 409


@app.errorhandler(ValueError)
def handle_bad_value(err: ValueError):
    return jsonify({"error": str(err)}), 400


# ---------------------------------------------------------------------------
# Saves
# ---------------------------------------------------------------------------

@app.route("/api/saves")
def api_list_saves():
    conn = _connection()
    try:
        return jsonify({"saves": list_saves(conn)})
    finally:
        conn.close()


@app.route("/api/saves/<int:slot>", methods=["POST"])
def api_new_career(slot: int):
    """Start a new career in *slot*, replacing whatever was saved there."""
    data = request.get_json(silent=True) or {}
    seed = data.get("seed", app.config["ENGINE_SEED"])
    state = generate_league(
        seed=seed,
        user_club_index=int(data.get("club_index", 0)),
        manager_name=str(data.get("manager_name", "Manager")),
    )
    with _sim_week_lock:
        conn = _connection()
        try:
            save_snapshot(conn, state, slot)
        finally:
            conn.close()
    logger.info("New career in slot %d at %s", slot, state.user_club.name)
    return jsonify({"slot": slot, "club_id": state.user_club_id, "club_name": state.user_club.name}), 201


@app.route("/api/saves/<int:slot>", methods=["DELETE"])
def api_delete_save(slot: int):
    with _sim_week_lock:
        conn = _connection()
        try:
            deleted = delete_save(conn, slot)
        finally:
            conn.close()
    if not deleted:
        raise UnknownEntityError("save slot", str(slot))
    return jsonify({"deleted": slot})


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------

@app.route("/api/<int:slot>/state")
def api_state(slot: int):
    conn = _connection()
    try:
        return jsonify(_load(conn, slot).to_dict())
    finally:
        conn.close()


@app.route("/api/<int:slot>/club")
def api_club(slot: int):
    """Human club overview with its squad."""
    conn = _connection()
    try:
        state = _load(conn, slot)
    finally:
        conn.close()
    club = state.user_club
    total = state.total_weeks
    windows = get_transfer_windows(total)
    return jsonify({
        "club": club.to_dict(),
        "squad": [p.to_dict() for p in state.roster_players(club.id)],
        "current_week": state.current_week,
        "total_weeks": total,
        "window_open": is_window_open(state.current_week, total),
        "windows": {"summer": list(windows.summer), "winter": list(windows.winter)},
        "awaiting_retirement_decision": state.awaiting_retirement_decision,
        "season_complete": state.season_complete,
    })


@app.route("/api/<int:slot>/table")
def api_table(slot: int):
    conn = _connection()
    try:
        state = _load(conn, slot)
    finally:
        conn.close()
    league = state.user_club.league
    table = rank_clubs([state.clubs[cid] for cid in state.league_club_ids(league)])
    return jsonify({
        "league": league,
        "table": [
            {
                "rank": i + 1, "club_id": c.id, "name": c.name, "played": c.played, "won": c.won,
                "drawn": c.drawn, "lost": c.lost, "goals_for": c.goals_for,
                "goals_against": c.goals_against, "goal_difference": c.goal_difference, "points": c.points,
            }
            for i, c in enumerate(table)
        ],
    })


@app.route("/api/<int:slot>/players/<player_id>")
def api_player(slot: int, player_id: str):
    conn = _connection()
    try:
        state = _load(conn, slot)
    finally:
        conn.close()
    player = state.players.get(player_id)
    if player is None:
        raise UnknownEntityError("player", player_id)
    body = player.to_dict()
    body["club_id"] = state.owner_of(player_id)
    body["scouting_report"] = scouting_report(player)
    return jsonify(body)


@app.route("/api/<int:slot>/mailbox")
def api_mailbox(slot: int):
    conn = _connection()
    try:
        state = _load(conn, slot)
    finally:
        conn.close()
    return jsonify({"mail": [m.to_dict() for m in reversed(state.mailbox)]})


@app.route("/api/<int:slot>/transfers")
def api_transfers(slot: int):
    conn = _connection()
    try:
        _load(conn, slot)
        records = get_transfer_history(conn, slot, request.args.get("season"))
    finally:
        conn.close()
    return jsonify({"transfers": [t.to_dict() for t in records]})


# ---------------------------------------------------------------------------
# Simulation
# ---------------------------------------------------------------------------

@app.route("/api/<int:slot>/sim-week", methods=["POST"])
def api_sim_week(slot: int):
    """Play the current week and run the tick."""
    return _run_action(slot, _sim_week, committed=True)


def _sim_week(state: SeasonState) -> TickResult:
    if state.awaiting_retirement_decision:
        raise EngineError("Players have announced their retirement; persuade or acknowledge them first.")
    return simulate_week(state, _rng(state, "week"))


def _should_stop(state: SeasonState) -> bool:
    return state.season_complete or state.awaiting_retirement_decision or state.career.game_over


@app.route("/api/<int:slot>/sim-season", methods=["POST"])
def api_sim_season(slot: int):
    """Simulate the remaining weeks; pauses for retirement decisions.

    With ``X-Stream-Progress: true`` the response streams one percentage per
    tick. Each tick is saved as it completes, so cancelling keeps whole weeks.
    """
    cancel = threading.Event()
    _cancel_flags[slot] = cancel

    def _season_stream():
        yield "0\n"
        with _sim_week_lock:
            conn = _connection()
            try:
                state = _load(conn, slot)
                remaining = max(1, state.total_weeks - state.current_week + 1)
                weeks_simmed = 0
                while not _should_stop(state):
                    if cancel.is_set():
                        yield "cancelled\n"
                        break
                    result = simulate_week(state, _rng(state, "week"))
                    state = result.state
                    save_snapshot(conn, state, slot)
                    weeks_simmed += 1
                    yield f"{min(100, int(100 * weeks_simmed / remaining))}\n"
                logger.info("Simulated %d week(s) in slot %d", weeks_simmed, slot)
                yield f"done:{state.current_week}\n"
            finally:
                conn.close()
                _cancel_flags.pop(slot, None)

    if request.headers.get("X-Stream-Progress") == "true":
        return Response(stream_with_context(_season_stream()), content_type="text/plain; charset=utf-8")

    lines = list(_season_stream())
    conn = _connection()
    try:
        state = _load(conn, slot)
    finally:
        conn.close()
    return jsonify({
        "progress": [line for line in lines if line[0].isdigit()],
        "cancelled": "cancelled\n" in lines,
        "current_week": state.current_week,
        "season_complete": state.season_complete,
        "awaiting_retirement_decision": state.awaiting_retirement_decision,
        "game_over": state.career.game_over,
    })


@app.route("/api/<int:slot>/sim-season/cancel", methods=["POST"])
def api_cancel_sim(slot: int):
    flag = _cancel_flags.get(slot)
    if flag is not None:
        flag.set()
    return jsonify({"cancelled": flag is not None})


@app.route("/api/<int:slot>/new-season", methods=["POST"])
def api_new_season(slot: int):
    return _run_action(slot, lambda state: start_new_season(state, _rng(state, "new-season")))


# ---------------------------------------------------------------------------
# Transfer market
# ---------------------------------------------------------------------------

@app.route("/api/<int:slot>/players/<player_id>/transfer-list", methods=["POST"])
def api_transfer_list(slot: int, player_id: str):
    return _run_action(slot, lambda state: add_to_transfer_list(state, player_id, _rng(state, "list")))


@app.route("/api/<int:slot>/players/<player_id>/loan-list", methods=["POST"])
def api_loan_list(slot: int, player_id: str):
    return _run_action(slot, lambda state: add_to_loan_list(state, player_id, _rng(state, "loan")))


@app.route("/api/<int:slot>/players/<player_id>/unlist", methods=["POST"])
def api_unlist(slot: int, player_id: str):
    return _run_action(slot, lambda state: remove_from_lists(state, player_id))


@app.route("/api/<int:slot>/players/<player_id>/release", methods=["POST"])
def api_release(slot: int, player_id: str):
    return _run_action(slot, lambda state: release_player(state, player_id))


@app.route("/api/<int:slot>/players/<player_id>/favorite", methods=["POST"])
def api_favorite(slot: int, player_id: str):
    return _run_action(slot, lambda state: toggle_favorite(state, player_id))


@app.route("/api/<int:slot>/players/<player_id>/renew", methods=["POST"])
def api_renew(slot: int, player_id: str):
    wage = _json_int("wage")
    years = _json_int("years")
    return _run_action(slot, lambda state: renew_contract(state, player_id, wage, years))


@app.route("/api/<int:slot>/players/<player_id>/offers/<offer_id>/accept", methods=["POST"])
def api_accept_offer(slot: int, player_id: str, offer_id: str):
    return _run_action(slot, lambda state: accept_offer(state, player_id, offer_id, _rng(state, "accept")))


@app.route("/api/<int:slot>/players/<player_id>/offers/<offer_id>/reject", methods=["POST"])
def api_reject_offer(slot: int, player_id: str, offer_id: str):
    return _run_action(slot, lambda state: reject_offer(state, player_id, offer_id))


@app.route("/api/<int:slot>/players/<player_id>/offers/<offer_id>/counter", methods=["POST"])
def api_counter_offer(slot: int, player_id: str, offer_id: str):
    amount = _json_int("amount")
    return _run_action(slot, lambda state: counter_offer(state, player_id, offer_id, amount))


# ---------------------------------------------------------------------------
# Retirement, stadium, career
# ---------------------------------------------------------------------------

@app.route("/api/<int:slot>/players/<player_id>/persuade", methods=["POST"])
def api_persuade(slot: int, player_id: str):
    return _run_action(slot, lambda state: attempt_persuasion(state, player_id, _rng(state, f"persuade:{player_id}")))


@app.route("/api/<int:slot>/retirements/acknowledge", methods=["POST"])
def api_acknowledge_retirements(slot: int):
    return _run_action(slot, acknowledge_retirements)


@app.route("/api/<int:slot>/stadium/expand", methods=["POST"])
def api_stadium_expand(slot: int):
    return _run_action(slot, start_stadium_expansion)


@app.route("/api/<int:slot>/stadium/sponsor/accept", methods=["POST"])
def api_sponsor_accept(slot: int):
    return _run_action(slot, accept_sponsor_offer)


@app.route("/api/<int:slot>/stadium/sponsor/reject", methods=["POST"])
def api_sponsor_reject(slot: int):
    return _run_action(slot, reject_sponsor_offer)


@app.route("/api/<int:slot>/manager-offers/<offer_id>/accept", methods=["POST"])
def api_accept_manager_offer(slot: int, offer_id: str):
    return _run_action(slot, lambda state: accept_manager_offer(state, offer_id))


@app.route("/api/<int:slot>/manager-offers/decline", methods=["POST"])
def api_decline_manager_offers(slot: int):
    return _run_action(slot, decline_manager_offers)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app.run(debug=True, port=5000)
