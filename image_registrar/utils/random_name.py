import random
import string

_ALPHANUM = string.ascii_letters + string.digits

_rng = random.SystemRandom()


def random_alphanumeric(length: int = 7) -> str:
    return "".join(_rng.choice(_ALPHANUM) for _ in range(length))
