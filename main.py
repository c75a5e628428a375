from rich.pretty import pprint

from keelson import *

__prog__ = "keelson"


@command("cache:clear", aliases=["cc"], description="clear the application cache")
def clear(input):
    pprint(input.arguments | input.options)


clear.add_argument("pool", Mode.OPTIONAL, "the pool to clear", "default")
clear.add_option("no-warmup", "w", description="skip the cache warmup")

registry = Registry([clear])


if __name__ == '__main__':
    dispatch(registry, ArgvInput(), shell=True, fancy=True)
