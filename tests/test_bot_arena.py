from mus.betting import BetAction, BettingStatus
from mus.cards import CARD_CATALOG
from mus.game import GameSession, RoundStage
from mus.hands import Phase
from mus.negotiation import Vote
from mus.rules_schema import RuleSet

from bots import AggressiveBot, BalancedBot, BluffBot, BotStrategy, CautiousBot, RandomBot
from bots.bot_arena import main, play_round, run_match
from bots.heuristic import hand_quality, phase_strength


def test_run_match_executes():
    bots = [BalancedBot(seed=1), AggressiveBot(seed=2), CautiousBot(seed=3), BluffBot(seed=4)]
    results = run_match(bots, seed=7, rules=RuleSet(win_score=30))
    assert results["winner"] in ("AB", "CD")
    assert max(results["scores"]) >= 30
    assert len(results["history"]) == results["rounds"]


def test_random_bots_finish_a_game():
    bots = [RandomBot(seed=seat) for seat in range(4)]
    results = run_match(bots, seed=11)
    assert results["winner"] in ("AB", "CD")


def test_play_round_completes_engine():
    session = GameSession(seed=3)
    engine = session.start_round()
    play_round(engine, [BalancedBot(seed=seat) for seat in range(4)])
    assert engine.stage is RoundStage.COMPLETE
    assert engine.card_count() == 40


def test_bots_force_josta_after_max_exchanges():
    session = GameSession(seed=3)
    engine = session.start_round()
    engine.negotiation.exchanges = 3
    assert BluffBot(seed=0).vote(engine, 0) is Vote.JOSTA


def test_base_strategy_answers_legally():
    session = GameSession(seed=3)
    engine = session.start_round()
    bot = BotStrategy()
    engine.vote(0, bot.vote(engine, 0))
    assert bot.decide_bet(engine, 0).action is BetAction.PASO
    engine.bet(0, bot.decide_bet(engine, 0))
    assert engine.betting.status is BettingStatus.NO_BET


def test_hand_strength_helpers_are_bounded():
    hand = list(CARD_CATALOG[:4])
    assert 0.0 <= hand_quality(hand) <= 1.0
    for phase in Phase:
        assert 0.0 <= phase_strength(phase, hand) <= 1.0


def test_arena_cli_prints_summary(capsys):
    main(["--games", "1", "--seed", "5", "--win-score", "30"])
    out = capsys.readouterr().out
    assert "Game 1" in out
    assert "Wins -> AB" in out
