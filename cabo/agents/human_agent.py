"""Human agent - reads intents from the terminal."""

from cabo.engine import (
    CallLastRound,
    DrawCard,
    EndReveal,
    Intent,
    PlayerView,
    SelectInteraction,
    TapTarget,
    Undo,
)
from cabo.engine.game_state import SlotView


def _format_slots(slots: list[SlotView]) -> str:
    parts = []
    for i, slot in enumerate(slots):
        face = str(slot.card) if slot.card else "??"
        parts.append(f"[{i}] {face}")
    return " ".join(parts) if parts else "(no cards)"


def _describe(intent: Intent, view: PlayerView) -> str:
    if isinstance(intent, DrawCard):
        return f"DRAW from {intent.pile.value} pile"
    if isinstance(intent, SelectInteraction):
        return f"SELECT {intent.interaction}"
    if isinstance(intent, TapTarget):
        if view.drawn_card and intent.card_id == view.drawn_card.id:
            return f"TAP drawn card {view.drawn_card}"
        for i, slot in enumerate(view.my_hand):
            if slot.card_id == intent.card_id:
                return f"TAP your card [{i}]"
        for pid, slots in view.other_hands.items():
            for i, slot in enumerate(slots):
                if slot.card_id == intent.card_id:
                    return f"TAP player {pid}'s card [{i}]"
        return f"TAP {intent.card_id}"
    if isinstance(intent, EndReveal):
        return "DONE looking"
    if isinstance(intent, Undo):
        return "UNDO"
    if isinstance(intent, CallLastRound):
        return "CALL LAST ROUND (Cabo)"
    return type(intent).__name__


class HumanAgent:
    """Agent that prompts the human for input via terminal."""

    def __init__(self, name: str = "human"):
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def get_intent(
        self,
        player_view: PlayerView,
        legal_intents: list[Intent],
        player_id: int,
    ) -> Intent | None:
        if not legal_intents:
            return None

        print(f"\n--- {self._name}, your turn ({player_view.stage.value}) ---")
        print("Your hand:", _format_slots(player_view.my_hand))
        for pid, slots in player_view.other_hands.items():
            print(f"Player {pid}:", _format_slots(slots))
        print("Top discard:", player_view.top_discard)
        if player_view.drawn_card:
            print("Drawn card:", player_view.drawn_card)
        if player_view.last_round_caller is not None:
            print(f"LAST ROUND called by player {player_view.last_round_caller}")
        if player_view.history:
            print("Last event:", player_view.history[-1])

        print("\nLegal actions:")
        for i, intent in enumerate(legal_intents):
            print(f"  {i}: {_describe(intent, player_view)}")

        while True:
            try:
                raw = input("Enter number: ").strip()
                idx = int(raw)
                if 0 <= idx < len(legal_intents):
                    return legal_intents[idx]
            except ValueError:
                pass
            print("Invalid. Try again.")

    def regard_cards(self, player_view: PlayerView) -> None:
        print(f"\n--- {self._name}, take a look at your cards ---")
        print("Your hand:", _format_slots(player_view.my_hand))
        input("Remember them, then press Enter and pass the device. ")
