#!/usr/bin/env python3
"""
Tests for the storage backends and the recursive file walker.
"""

import pytest

from relurls.utils.file_walker import list_files
from relurls.utils.memory_storage import MemoryStorage
from relurls.utils.storage import LocalStorage


def test_list_files_all(site):
    files = list_files('/dist', site)

    assert set(files) == {
        'index.html', 'blog/index.html', 'about/index.html',
        'img.jpg', 'stuff.js', 'favicon.svg', 'favicon.ico',
        '_astro/main.css', '_astro/logo.png', '_astro/hero.jpg', '_astro/main.js',
    }


def test_list_files_with_extensions(site):
    assert set(list_files('/dist', site, extensions=['.html'])) == {
        'index.html', 'blog/index.html', 'about/index.html'}
    assert set(list_files('/dist', site, extensions=['.jpg', '.png'])) == {
        'img.jpg', '_astro/logo.png', '_astro/hero.jpg'}


def test_list_files_base_dir(site):
    files = list_files('/dist/_astro', site, base_dir='/dist')
    assert set(files) == {'_astro/main.css', '_astro/logo.png', '_astro/hero.jpg', '_astro/main.js'}


def test_list_files_missing_root(site):
    with pytest.raises(FileNotFoundError):
        list_files('/missing', site)


def test_memory_storage_read_write(site):
    site.write_file('/dist/new.html', '<p>new</p>')

    assert site.read_file('/dist/new.html') == '<p>new</p>'
    assert site.path_info('/dist/new.html').is_file
    assert site.path_info('/dist/blog').is_directory
    assert 'new.html' in site.list_directory('/dist')


def test_memory_storage_errors(site):
    with pytest.raises(FileNotFoundError):
        site.read_file('/dist/nope.html')
    with pytest.raises(IsADirectoryError):
        site.read_file('/dist/blog')
    with pytest.raises(NotADirectoryError):
        site.list_directory('/dist/index.html')
    with pytest.raises(NotADirectoryError):
        site.read_file('/dist/index.html/child')
    with pytest.raises(FileNotFoundError):
        site.write_file('/nowhere/index.html', 'x')
    with pytest.raises(OSError):
        site.remove_directory('/dist/blog')


def test_memory_storage_delete_and_remove(site):
    site.delete_file('/dist/blog/index.html')
    site.remove_directory('/dist/blog')

    assert not site.exists('/dist/blog')
    assert site.exists('/dist/about/index.html')


def test_memory_storage_resolve():
    storage = MemoryStorage()

    assert storage.resolve('/dist', '../public') == '/public'
    assert storage.resolve('dist', 'blog') == '/dist/blog'
    assert storage.resolve('/dist', '/abs') == '/abs'


def test_memory_storage_clone_is_deep(site):
    clone = site.clone()
    clone.write_file('/dist/index.html', 'changed')
    clone.delete_file('/dist/img.jpg')

    assert site.read_file('/dist/index.html') != 'changed'
    assert site.exists('/dist/img.jpg')


def test_local_storage_roundtrip(tmp_path):
    storage = LocalStorage()
    (tmp_path / 'dist' / 'blog').mkdir(parents=True)
    page = tmp_path / 'dist' / 'blog' / 'index.html'
    page.write_bytes(b'<a href="/">Home</a>\r\n')

    assert storage.read_file(str(page)) == '<a href="/">Home</a>\r\n'
    storage.write_file(str(page), '<a href="../index.html">Home</a>\r\n')
    assert page.read_bytes() == b'<a href="../index.html">Home</a>\r\n'

    assert storage.path_info(str(tmp_path / 'dist')).is_directory
    assert storage.path_info(str(page)).is_file
    assert set(list_files(str(tmp_path / 'dist'), storage)) == {'blog/index.html'}
    assert storage.resolve(str(tmp_path / 'dist'), '../public') == str(tmp_path / 'public')

    storage.delete_file(str(page))
    storage.remove_directory(str(tmp_path / 'dist' / 'blog'))
    assert not storage.exists(str(tmp_path / 'dist' / 'blog'))
