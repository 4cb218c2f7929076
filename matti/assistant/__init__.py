import random

GREETINGS = ("Hey {name}!", "Hoi {name}!", "Yo {name}!")
QUESTIONS = ("Waar wil je het over hebben?", "Wat kan ik voor je doen?", "Hoe kan ik je helpen?")


def generate_welcome_message(name: str, rng: random.Random | None = None) -> str:
    """Greeting built from fixed templates, no language model involved."""
    rng = rng or random.Random()
    return f"{rng.choice(GREETINGS).format(name=name)} {rng.choice(QUESTIONS)}"
