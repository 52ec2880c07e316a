from atcommander import *

__prog__ = "greeter"

app = Commander("greeter", "Copyright (c) the atcommander authors.", shell=True, fancy=True, colorful=True)


def declare(context):
    context.declare("loud", OptionBool(False), "shout the greeting")
    context.declare("who", OptionString("world"), "who to greet")
    context.declare("times", OptionInt(1), "how many greetings")
    context.declare("lang", OptionChoice(("en", "fr")), "greeting language")


@app.command("hello", descr="Print a greeting", initializer=declare)
def hello(context):
    word = {"en": "hello", "fr": "bonjour"}[context.option("lang").value]
    line = "%s, %s" % (word, context.option("who").value)
    for _ in range(context.option("times").value):
        context.console.print(line.upper() if context.option("loud").value else line, markup=False)


@app.command("fail")
def fail(context):
    """Always fail, to show how errors are reported"""
    raise RuntimeError("this command always fails")


if __name__ == '__main__':
    invoke(app)
