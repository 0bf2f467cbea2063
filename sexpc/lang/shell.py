"""Handles interactive/command-line mode for the sexpc interpreter. Uses cmd as backend."""

import cmd

from sexpc.grammar.lexical import PunctuationToken


def open_brackets(line):
    """Number of brackets in line left open (negative if there are more closing than opening brackets). Ignores
    brackets inside comments and strings.
    """
    balance = 0
    in_string = in_comment = False
    for idx, char in enumerate(line):
        if char == "\n":
            in_string = in_comment = False
        elif in_comment:
            continue
        elif in_string:
            in_string = char != "\""
        elif char == "\"":
            in_string = True
        elif line.startswith("//", idx):
            in_comment = True
        elif char in PunctuationToken.OPENING:
            balance += 1
        elif char in PunctuationToken.CLOSING:
            balance -= 1
    return balance


class Shell(cmd.Cmd):
    """sexpc interpreter shell. Every complete expression typed is run as its own program, but all of them share the
    session's environment, so names bound with let stay bound.
    """
    intro = "sexpc interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continutations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self._tmp_line = ""

    def default(self, line):
        """Executes arbitrary sexpc expression."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            line = self._tmp_line + line + "\n"

            if open_brackets(line) > 0:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            self.sess.add(line)
            self.sess.run()

            result = self.sess.pop()
            if result is not None:
                print(result)

    def do_env(self, arg):
        """Lists the names bound with let in this session."""
        for name, value in sorted(self.sess.environment.items()):
            print(f"{name} = {value}")

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the sexpc interpreter!\n\n"
              "Programs are bracketed expressions: the first item names a builtin and the \n"
              "rest are its arguments. Builtins: read_int, read_str, println, sum, join, \n"
              "let, vec.\n\n"
              "Try it out by typing '(let A 40)'. This will bind 40 to the name 'A'. Next, \n"
              "try typing '(println (sum A 2))'. This will print '42'. 'env' lists the \n"
              "names bound so far.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
