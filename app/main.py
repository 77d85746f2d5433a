"""
Streamlit Frontend for Aurum Memory

The memory game screen of the AurumFocus app: pick a difficulty,
flip currency cards two at a time, and watch stats and achievements
fill up.

DESIGN PRINCIPLES:
1. The page only talks to MemoryGameSession
2. A rejected click simply does nothing
3. A mismatched pair stays visible for the configured delay
4. Stats and achievements are read from snapshots, never mutated here
"""

import time

import streamlit as st

from aurum_memory.models.game import Difficulty, GameState, MemoryGameStats
from aurum_memory.session import MemoryGameSession, create_session


# Page configuration
st.set_page_config(
    page_title="Aurum Memory",
    page_icon="🪙",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        min-height: 72px;
        font-size: 1.4em;
    }
    .success-box {
        padding: 20px;
        background-color: #d4edda;
        border-radius: 10px;
        border-left: 5px solid #28a745;
        margin: 10px 0;
    }
</style>
""", unsafe_allow_html=True)


@st.cache_resource
def get_session() -> MemoryGameSession:
    """Get or create the game session (cached for the server process)."""
    return create_session()


def main():
    """Main application entry point."""
    session = get_session()

    st.sidebar.title("🪙 Aurum Memory")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["🃏 Play", "📊 Stats", "🏆 Achievements"],
        index=0,
    )

    if page == "🃏 Play":
        render_game_page(session)
    elif page == "📊 Stats":
        render_stats_page(session)
    elif page == "🏆 Achievements":
        render_achievements_page(session)


def render_game_page(session: MemoryGameSession):
    """Render the board."""
    state = session.state
    st.title("🃏 Currency Memory")

    col1, col2, col3 = st.columns([2, 1, 1])
    with col1:
        difficulty = st.selectbox(
            "Difficulty",
            options=list(Difficulty),
            index=list(Difficulty).index(state.difficulty),
            format_func=lambda d: f"{d.label} ({d.rows}×{d.columns})",
        )
    with col2:
        if st.button("🔄 New Game", type="primary"):
            session.start_new_game(difficulty)
            st.rerun()
    with col3:
        if st.button("▶️ Play Again", disabled=state.is_game_active):
            session.start_new_game()
            st.rerun()

    render_scoreboard(state, session.game_time)

    if state.is_game_complete:
        st.markdown(f"""
        <div class="success-box">
            <h3>🎉 Well done!</h3>
            <p>You completed the game in {state.moves} moves and {int(session.game_time)} seconds!</p>
        </div>
        """, unsafe_allow_html=True)

    render_board(session, state)

    # Keep the mismatched pair on screen, then redraw after the flip back
    if session.has_pending_mismatch:
        time.sleep(session.flip_back_delay)
        st.rerun()


def render_scoreboard(state: GameState, game_time: float):
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Difficulty", state.difficulty.label)
    col2.metric("Moves", state.moves)
    col3.metric("Matches", f"{state.matches}/{state.difficulty.pair_count}")
    col4.metric("Time", f"{int(game_time)}s")


def render_board(session: MemoryGameSession, state: GameState):
    columns = state.difficulty.columns
    for row_start in range(0, len(state.cards), columns):
        row = st.columns(columns)
        for offset, card in enumerate(state.cards[row_start:row_start + columns]):
            index = row_start + offset
            if card.is_flipped:
                label = f"{card.currency.flag} {card.currency.symbol}"
            else:
                label = "🪙"
            with row[offset]:
                if st.button(
                    label,
                    key=f"card-{card.id}",
                    disabled=card.is_flipped,
                    help=card.currency.display_name if card.is_matched else None,
                ):
                    if session.select_card(index):
                        st.rerun()


def _or_na(value: float, fmt: str) -> str:
    return fmt.format(value) if value > 0 else "N/A"


def render_stats_page(session: MemoryGameSession):
    """Render lifetime stats."""
    stats: MemoryGameStats = session.stats
    st.title("📊 Statistics")

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Games Played", stats.games_played)
    col2.metric("Games Won", stats.games_won)
    col3.metric("Win Rate", "{:.1f}%".format(stats.win_rate))
    col4.metric("Current Streak", stats.current_streak)

    st.markdown("### By Difficulty")
    columns = st.columns(len(Difficulty) + 1)
    for column, difficulty in zip(columns, Difficulty):
        column.metric(f"{difficulty.label} Wins", stats.wins_for(difficulty))
    columns[-1].metric("Longest Streak", stats.longest_streak)

    st.markdown("### Records")
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Best Time", _or_na(stats.best_time, "{:.0f}s"))
    col2.metric("Best Moves", _or_na(stats.best_moves, "{}"))
    col3.metric("Average Moves", _or_na(stats.average_moves, "{:.1f}"))
    col4.metric("Total Moves", stats.total_moves)

    st.markdown("---")
    if st.button("🗑️ Reset Stats"):
        session.reset_stats()
        st.rerun()


def render_achievements_page(session: MemoryGameSession):
    """Render the achievement catalog."""
    summary = session.achievement_summary()
    st.title("🏆 Achievements")

    st.markdown(f"**{summary.unlocked_count} / {summary.total}** unlocked")
    st.progress(summary.completion_percent / 100)
    st.caption(f"{summary.completion_percent}% Complete")

    if summary.unlocked:
        st.markdown("### Unlocked")
        for achievement in summary.unlocked:
            unlocked_on = (
                achievement.unlocked_at.strftime("%d %B %Y")
                if achievement.unlocked_at
                else ""
            )
            st.success(f"**{achievement.title}** - {achievement.description}  \n{unlocked_on}")

    if summary.locked:
        st.markdown("### Locked")
        for achievement in summary.locked:
            st.info(f"🔒 **{achievement.title}** - {achievement.description}")


if __name__ == "__main__":
    main()
