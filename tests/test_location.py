import unittest

from docprint.location import (
    PageFile,
    anchor_id,
    is_absolute_path,
    join,
    page_to_file,
    prepare_link,
    resolve,
    to_anchor_path,
)


class AbsolutePathTests(unittest.TestCase):
    def test_schemes_and_protocol_relative_are_absolute(self) -> None:
        for url in ('https://example.com/a.md', 'http://x', 'mailto:a@b.c', 'data:image/png;base64,AA', '//cdn.example.com/x.js'):
            self.assertTrue(is_absolute_path(url), url)

    def test_docset_paths_are_relative(self) -> None:
        for url in ('/guide.md', './guide.md', '../up.md', 'guide.md', '#intro', ''):
            self.assertFalse(is_absolute_path(url), url)


class PrepareLinkTests(unittest.TestCase):
    def test_relative_paths_resolve_against_page_directory(self) -> None:
        self.assertEqual(prepare_link('./a/b.md', '/docs/x/page.md'), '/docs/x/a/b.md')
        self.assertEqual(prepare_link('../up.md', '/docs/x/page.md'), '/docs/up.md')
        self.assertEqual(prepare_link('other.md#sec', '/docs/page.md'), '/docs/other.md#sec')

    def test_fragment_only_points_at_base_page(self) -> None:
        self.assertEqual(prepare_link('#intro', '/docs/x/page.md'), '/docs/x/page.md#intro')

    def test_rooted_paths_are_normalized_not_rebased(self) -> None:
        self.assertEqual(prepare_link('/guide/./setup.md', '/docs/page.md'), '/guide/setup.md')

    def test_collapses_slashes_and_dots(self) -> None:
        self.assertEqual(prepare_link('a//b/./c.md', '/p.md'), '/a/b/c.md')
        self.assertEqual(prepare_link('sub/', '/docs/p.md'), '/docs/sub/')

    def test_never_escapes_above_root(self) -> None:
        self.assertEqual(prepare_link('../../../a.md', '/docs/page.md'), '/a.md')
        self.assertEqual(prepare_link('..', '/p.md'), '/')

    def test_absolute_urls_pass_through(self) -> None:
        self.assertEqual(prepare_link('https://example.com/x?y=1#z', '/p.md'), 'https://example.com/x?y=1#z')

    def test_empty_url_is_best_effort(self) -> None:
        self.assertEqual(prepare_link('', '/docs/p.md'), '/docs/p.md')
        self.assertEqual(prepare_link('', ''), '/')

    def test_resolution_is_idempotent(self) -> None:
        paths = ['./a/b.md', '../up.md', '#intro', 'x.md#y', 'sub/', '.', './', '..', 'a//b/../c.md', '']
        bases = ['/docs/x/page.md', '/page.md', '/deep/er/still/p.md', '/dir/']
        for p in paths:
            for b in bases:
                once = resolve(p, b)
                self.assertEqual(resolve(once, b), once, (p, b))
                self.assertEqual(resolve(once, '/unrelated/base.md'), once, (p, b))


class PageToFileTests(unittest.TestCase):
    def test_adds_markdown_extension(self) -> None:
        self.assertEqual(page_to_file('guide', '/root'), PageFile(cwd='/root', path='/guide.md'))

    def test_directory_maps_to_readme(self) -> None:
        self.assertEqual(page_to_file('dir/').path, '/dir/README.md')
        self.assertEqual(page_to_file('/').path, '/README.md')

    def test_strips_fragment_and_query(self) -> None:
        self.assertEqual(page_to_file('/a/b.md#x').path, '/a/b.md')
        self.assertEqual(page_to_file('guide.md?v=1').path, '/guide.md')


class AnchorHelpersTests(unittest.TestCase):
    def test_join(self) -> None:
        self.assertEqual(join('https://h/docs/', '/a.md'), 'https://h/docs/a.md')
        self.assertEqual(join('/srv/docs', '/a.md'), '/srv/docs/a.md')
        self.assertEqual(join('', '/a.md'), '/a.md')

    def test_to_anchor_path_replaces_separators(self) -> None:
        self.assertEqual(to_anchor_path('/docs/x/a.md#s'), '--docs--x--a.md--s')

    def test_anchor_id_strips_one_leading_slash(self) -> None:
        self.assertEqual(anchor_id('/docs/a.md'), 'docs/a.md')
        self.assertEqual(anchor_id('a.md'), 'a.md')


if __name__ == '__main__':
    unittest.main()
