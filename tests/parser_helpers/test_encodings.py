#! /usr/bin/env python3

import string
import urllib.parse

from mwrest.parser_helpers.encodings import *


class test_encodings:
    ascii_all = "".join(chr(i) for i in range(128))
    url_unreserved = string.ascii_letters + string.digits + "-_.~"
    unicode_sample = "ěščřžýáíéúů,.-§€¶ŧ→øþłŁ°ΩŁE®Ŧ¥↑ıØÞŁ&̛ĦŊªÐ§Æ<>©‘’Nº×÷˙ß˝"

    def test_skip_chars(self):
        for s in [self.ascii_all, self.unicode_sample]:
            e1 = encode(s, skip_chars=self.url_unreserved)
            e2 = urllib.parse.quote(s, safe=self.url_unreserved)
            assert e1 == e2

    def test_escape_char(self):
        for s in [self.ascii_all, self.unicode_sample]:
            e1 = encode(s, escape_char=".", skip_chars=self.url_unreserved)
            e2 = urllib.parse.quote(s, safe=self.url_unreserved)
            e2 = e2.replace("%", ".")
            assert e1 == e2

    def test_special_map(self):
        assert encode("a b/c", skip_chars="abc", special_map={" ": "_"}) == "a_b%2Fc"

    def test_urlencode(self):
        for s in [self.ascii_all, self.unicode_sample]:
            e1 = urlencode(s)
            e2 = urllib.parse.quote(s, safe=self.url_unreserved)
            assert e1 == e2

    def test_urlencode_path_separators(self):
        assert urlencode("Talk:Foo/Bar") == "Talk%3AFoo%2FBar"

