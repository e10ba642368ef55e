import logging
from typing import List

from bluff.messages import NextRevealCard
from bluff.models import OptionType, Phase, RevealItem, Room

logger = logging.getLogger(__name__)

UNKNOWN_AUTHOR = 'Unknown'


class RevealSequencer:
    """Orders the reveal cards and relays the host's advance signal.

    Clients walk the cards one at a time and skip LIE cards nobody voted
    for; the cursor lives on the clients, the server only relays.
    """

    def __init__(self, channel):
        self.channel = channel

    def build(self, room: Room) -> List[RevealItem]:
        items = []
        for option in room.shuffled_options:
            voters = [
                {
                    'name': p.name,
                    'bet': room.bets.get(p.id, 0),
                    'penalty': room.penalties.get(p.id, 0),
                }
                for p in room.players
                if room.votes.get(p.id) == option.text
            ]
            author_name = None
            if option.type == OptionType.LIE:
                author = room.get_player(option.author_id)
                author_name = author.name if author else UNKNOWN_AUTHOR
            items.append(RevealItem(text=option.text, type=option.type, author_name=author_name, voters=voters))
        # Lies first in voting order, truth last
        lies = [i for i in items if i.type == OptionType.LIE]
        truths = [i for i in items if i.type == OptionType.TRUTH]
        return lies + truths

    def request_next_card(self, room: Room, caller_id) -> bool:
        if room.phase != Phase.REVEAL or not room.is_host(caller_id):
            logger.debug(f"[reveal-ignored] code={room.code} phase={room.phase.value} caller={caller_id}")
            return False
        self.channel.broadcast(room.code, NextRevealCard())
        return True
