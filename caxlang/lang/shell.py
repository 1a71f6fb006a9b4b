"""Handles interactive/command-line mode for the cax interpreter. Uses cmd as backend."""

import cmd

from caxlang.grammar.parser import produce_ast


class Shell(cmd.Cmd):
    """cax interpreter shell."""
    intro = "cax expression interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def default(self, line):
        """Evaluates arbitrary cax expression."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line, add_to_prev = self.sess.preprocess_line(f"{self._tmp_line} {line}", self.line_num, False)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
            else:
                self._tmp_line = ""
                self.prompt = self._tmp_prompt

                if not line.strip():
                    return  # only a comment, nothing to evaluate

                self.sess.add(line.strip(), self.line_num)
                self.sess.run()

                if self.sess.results:
                    print(self.sess.pop())

    def do_backend(self, arg):
        """backend [interpreter|vm]: shows or switches the evaluation backend."""
        with self.sess.error_handler:
            if arg:
                self.sess.set_backend(arg.strip())
            print(self.sess.backend)

    def do_disassemble(self, arg):
        """disassemble EXPR: prints the bytecode EXPR compiles to, without running it."""
        with self.sess.error_handler:
            self.line_num += 1
            self.sess.add(arg.strip(), self.line_num)
            for __, lines in self.sess.disassemble():
                print("\n".join(lines))

    def do_ast(self, arg):
        """ast EXPR: prints the syntax tree of EXPR."""
        with self.sess.error_handler:
            self.line_num += 1
            self.sess.error_handler.register_line(self.sess.path, arg.strip(), self.line_num)
            for expr in produce_ast(arg.strip()):
                print(expr.display())
            self.sess.error_handler.remove_line(self.sess.path)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        if arg:
            return super().do_help(arg)
        print("Welcome to the cax interpreter!\n\n"
              "Each line is a single expression made of numbers, strings, true, false, nil, \n"
              "parentheses and the operators + - * / ! == != < > <= >=.\n\n"
              "Try it out by typing '1 + 2 * 3'. Type 'backend vm' to evaluate on the \n"
              "register machine instead, 'disassemble 1 + 2' to see its bytecode, and \n"
              "'ast 1 + 2' to see its syntax tree.")

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
