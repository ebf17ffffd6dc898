"""
Inexpensive, broadly used support utilities.
"""

# Copyright 2026 The numcoll Authors
#
# This file is part of numcoll.
#
# numcoll is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# numcoll is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with numcoll.  If not, see <https://www.gnu.org/licenses/>.

__version__ = "0.0.1a0"
__author__ = "The numcoll Authors"


###############################################################################
# IMPORT                                                                      #
###############################################################################

# Import external.
import inspect as _inspect
import itertools as _itertools
import operator as _operator
import sys as _sys
import time as _time



###############################################################################
# LOGGING AND SETTINGS                                                        #
###############################################################################

class LogPrintTiming(object):
    _format_attr_name = "{}_{}_time".format
    _format_attr_label = "{}={!r}".format
    _format_keyword_text = "{} {}{}".format
    _format_kwarg_text_for_nonstr_val = "{} = {!r}".format
    _format_kwarg_text_for_str_val = '{} = r"{}"'.format
    _format_line = "{}{}: {}{}{}\n".format
    _format_tagged_kwarg_text_for_nonstr_val = (
        _format_kwarg_text_for_nonstr_val.__self__ + "{}"
        ).format
    _format_tagged_kwarg_text_for_str_val = (
        _format_kwarg_text_for_str_val.__self__ + "{}"
        ).format
    _format_untimed_line = "{}{}{}\n".format

    def __init__(self, log, stdout=True, desc=".geometry_type"):
        """
        Facilitates formatting, logging, and printing of steps and their timing.

        log is a file object that specifies the file to which lines should be
        written. If log is instead None, logging is disabled.

        stdout is a boolean that specifies whether lines should be writted to
        stdout (e.g., printed to the screen).

        desc is a string or function that specifies how the descriptive text for
        a Geometry will be generated by default. More precisely, desc specifies
        the default value for the desc argument of .generate_geom_text().
        """
        self.log = log
        self.stdout = stdout
        self.default_desc = desc

    def generate_geom_text(self, geom, desc=None):
        """
        Generate and return a useful text description of a Geometry.

        geom is a Geometry for which descriptive text should be generated.

        desc is a string or function that specifies how the descriptive text is
        generated. It must have one of the following forms:
            ".attr_name" --> base text on geom.attr_name
            func() --> func(geom) is returned, without modification
        """
        if desc is None:
            desc = self.default_desc
        if not isinstance(desc, str):
            return desc(geom)
        if not desc.startswith("."):
            raise TypeError('desc must start with "." if it is a string')
        attr_name = desc[1:]
        value = _operator.attrgetter(attr_name)(geom)
        label = self._format_attr_label(attr_name, value)
        return "{} ({})".format(type(geom).__name__, label)

    def write_timed(self, text, geom_text="", indent="*", time=None):
        """
        Write out a time-stamped line.

        text is a string that specifies the text to write out.

        geom_text is a string or Geometry that determines what text in the line
        (if any) will be used to describe the corresponding Geometry. If
        geom_text is a string, it is not modified. If geom_text is instead a
        Geometry, geom_text is reset to .generate_geom_text(geom_text).

        indent is a string that specifies the text at the beginning of the line,
        that is, the text that comes immediately before the timestamp.

        time is a numeric value that specifies the seconds since the epoch to
        which the timestamp will correspond. If time is None, time.time() is
        called to populate it.
        """
        self._process_line(text, geom_text, indent, time)

    def write_untimed(self, text, geom_text=""):
        """
        Write out a line (without a timestamp).

        See .write_timed() for argument descriptions.
        """
        self._process_line(text, geom_text, untimed=True)

    def write_kwargs(self, kwargs, func=None, include_defaults=True,
                     header=None, include_unmatched=True,
                     unmatched_suffix="  # [no keyword match]"):
        """
        Write out keyword argument name-value pairs.

        Keyword argument name-value pairs are written out, optionally following
        a header, in either call-signature (if func is specified) or
        alphabetical (if func is None) order. A list of the names of any
        unmatched arguments (whether or not they were written out) is returned.

        kwargs is a dictionary that specifies keyword arguments paired to their
        corresponding values.

        func is a function that specifies the function to which kwargs
        corresponds.

        include_defaults is a boolean that specifies whether defaulted argument
        name-value pairs not present in kwargs should also be written out.

        header is a string that specifies a line that will be written out before
        writing out the argument name-value pairs. If header is None and func is
        specified, a header is automatically generated. Otherwise, if header
        evaluates False, no header is written out.

        include_unmatched is a boolean that specifies whether name-value pairs
        for argument names not explicitly belonging to func's call signature
        should be written out.

        unmatched_suffix is a string that specifies text that will be written
        out immediately after (and on the same line as) each name-value pair for
        unmatched arguments.

        Note: The written lines are formatted so that the log can later be
        read by read_settings().
        """
        if func is None:
            names = sorted(kwargs)
        else:
            spec = _inspect.getfullargspec(func)
            all_arg_names = spec.args
            func_defaults = spec.defaults
            if include_defaults and func_defaults is not None:
                default_kwargs = dict(
                    zip(all_arg_names[-len(func_defaults):], func_defaults)
                    )
                default_kwargs.update(kwargs)
                kwargs = default_kwargs  # *REASSIGNMENT*
            names = [arg_name for arg_name in all_arg_names
                     if arg_name in kwargs]
            if header is None:
                header = "# {}.{} arguments{}:".format(
                    func.__module__, func.__name__, "" if names else " (if any)"
                    )
        process_line = self._process_line
        if header:
            process_line(header, untimed=True)
        for name in names:
            val = kwargs[name]
            if isinstance(val, str):
                # Note: Raw string literals are more easily read by
                # humans, perhaps especially for Windows paths.
                format_this_line = self._format_kwarg_text_for_str_val
            else:
                format_this_line = self._format_kwarg_text_for_nonstr_val
            process_line(format_this_line(name, val), untimed=True)
        if func is None:
            unmatched_names = []
        else:
            unmatched_names = sorted(
                [name for name in kwargs if name not in names]
                )
            if include_unmatched:
                for name in unmatched_names:
                    val = kwargs[name]
                    if isinstance(val, str):
                        format_this_line = (
                            self._format_tagged_kwarg_text_for_str_val
                            )
                    else:
                        format_this_line = (
                            self._format_tagged_kwarg_text_for_nonstr_val
                            )
                    process_line(format_this_line(name, val, unmatched_suffix),
                                 untimed=True)
        process_line("", untimed=True)
        return unmatched_names

    def start(self, keyword, geom_text="", addendum="", indent="", time=None):
        """
        Register and write out the start of a step.

        keyword is a string that specifies a name for the step. It must be a
        viable attribute name (e.g., must not contain spaces, begin with a
        number, etc.) and be unique among all step names. Any underscores will
        be replaced by spaces when writing out.

        addendum is a string that specifies the text (if any) that should be
        inserted immediately after the keyword in the generated line.

        See .write_timed() for the remaining argument descriptions.
        """
        text, suffix = self._process(keyword, addendum, time)
        self._process_line(text, geom_text, indent, time, suffix)

    def end(self, keyword, geom_text="", addendum="", indent=" ", time=None):
        """
        Register and write out the end of a step.

        See .start() for all argument descriptions.
        """
        text, suffix = self._process(keyword, addendum, time, False)
        self._process_line(text, geom_text, indent, time, suffix)

    def _process(self, keyword, addendum, epoch_time, start=True):
        """
        Facilitate .start() and .end() functionality.

        A tuple of the form (text, suffix) is returned.
        """
        if epoch_time is None:
            epoch_time = _time.time()
        start_attr_name = self._format_attr_name(keyword, "start")
        if start:
            setattr(self, start_attr_name, epoch_time)
            suffix = ""
        else:
            end_attr_name = self._format_attr_name(keyword, "end")
            setattr(self, end_attr_name, epoch_time)
            suffix = " (took {:.1f} minutes)".format(
                (epoch_time - getattr(self, start_attr_name)) / 60.
                )
        return (self._format_keyword_text("started" if start else "ended",
                                          keyword.replace("_", " "), addendum),
                suffix)

    def _process_line(self, text, geom_text="", indent="", epoch_time=None,
                      suffix="", untimed=False):
        """
        Write out a line after generating any missing bits.
        """
        if not isinstance(geom_text, str):
            # *REASSIGNMENT*
            geom_text = ", for " + self.generate_geom_text(geom_text)
        if untimed:
            line = self._format_untimed_line(text, geom_text, suffix)
        else:
            if epoch_time is None:
                epoch_time = _time.time()
            line = self._format_line(
                indent, _time.asctime(_time.localtime(epoch_time)),
                text, geom_text, suffix
                )
        if self.log is not None:
            self.log.write(line)
            self.log.flush()
        if self.stdout:
            _sys.stdout.write(line)
            _sys.stdout.flush()


def read_settings(path):
    """
    Read settings from an external file.

    The external file must be simply formatted like:
        # These are settings.
        a = 0
        b = "one"
        c = {"two": 2, "three": True, "four": None}
        \"""
        A long comment.
        \"""
        d = 5
    A dictionary equivalent to the global namespace of the external file is
    returned.

    path is a string that specifies the path to the external settings file.
    """
    import ast
    literal_eval = ast.literal_eval
    settings_dict = {}
    with open(path) as f:
        open_tri_quote = False  # Initialize.
        for n, line in enumerate(f):
            if open_tri_quote:
                if '"""' in line:
                    open_tri_quote = False
                continue
            bare_line = line.strip()
            if bare_line.startswith("#") or not bare_line:
                continue
            if bare_line.startswith('"""'):
                # Note: A docstring-like comment may also close on the
                # same line.
                open_tri_quote = bare_line.count('"""') == 1
                continue
            var_name, _, val = bare_line.partition("=")
            # Note: Any trailing comment (e.g., "  # [no keyword
            # match]" written by LogPrintTiming.write_kwargs()) is
            # tolerated by parsing the value as an expression.
            try:
                settings_dict[var_name.rstrip()] = literal_eval(
                    ast.parse(val.lstrip(), mode="eval").body
                    )
            except (SyntaxError, ValueError):
                raise TypeError(
                    "settings file is not correctly formatted on line {}: {}".format(
                        n, path
                        )
                    )
    return settings_dict


def slide_pairwise(iterable):
    """
    Return iterable as iterable of sliding pair tuples.

    Ex: list(slide_pairwise(range(4))) --> [(0, 1), (1, 2), (2, 3)]
    """
    a, b = _itertools.tee(iterable)
    next(b, None)
    return zip(a, b)


def validate_string_option(value, arg_name, valid_options):
    """
    Validate string option against a container of valid options.

    If value is not in valid_options, a descriptive TypeError is raised.
    Otherwise, the string in valid_options that matches value will be
    returned. (This match is not case sensitive.)

    value is a string that specifies the user option to be validated.

    arg_name is a string that specifies the label that will be used to refer
    to value if any error is raised.

    valid_options is a container of all valid options.
    """
    if isinstance(value, str):
        if value in valid_options:
            return value
        value_upper = value.upper()
        for valid_option in valid_options:
            if value_upper == valid_option.upper():
                return valid_option
    raise TypeError(
        "{} is not one of {}: {!r}".format(
            arg_name, ", ".join(valid_options), value
            )
        )



###############################################################################
# LAZY ATTRIBUTES                                                             #
###############################################################################

class Lazy(object):
    """
    Base class for attributes that are derived on first access.

    If attribute_name is not found on an instance, a class-level method
    ._get_attribute_name() is called with the instance, and the result is
    stored as .attribute_name so that later lookups are ordinary attribute
    reads. Every such cached value is discarded by
        instance._Lazy__clear_lazy()
    which must be called whenever the underlying coordinates change.

    Warning: Helper methods whose names start with "_get_" become lazy
    attributes. Use another word (e.g., ._fetch_*()) for ordinary helpers.
    """

    def _fetch_lazy_names(self):
        "Return the set of names supported as lazy attributes."
        return {name[5:] for name in dir(type(self)) if name[:5] == "_get_"}

    def __dir__(self):
        dir_set = set(self.__dict__)
        dir_set.update(dir(type(self)))
        dir_set.update(self._fetch_lazy_names())
        return sorted(dir_set)

    def __getattr__(self, name):
        # Note: Names that start with "__" (e.g., "__deepcopy__" looked
        # up by copy on a half-initialized instance) are never lazy.
        if name.startswith("__"):
            raise AttributeError(name)
        try:
            func = object.__getattribute__(self, "_get_" + name)
        except AttributeError:
            # name is not lazy, so raise standard error.
            object.__getattribute__(self, name)
        result = func(self)
        setattr(self, name, result)
        return result

    def __clear_lazy(self):
        "Discard every cached lazy attribute."
        self_dict_pop = self.__dict__.pop
        for name in self._fetch_lazy_names():
            self_dict_pop(name, None)
