import threading

import pytest

from core.exceptions import InvalidInput, PostNotFound


def test_create_post_defaults(feed):
    post = feed.create_post(None, None, "  Dragon Strike\nA spinning kick from above  ")
    assert post.author_name == "Anonymous"
    assert post.title == "Dragon Strike"
    assert post.text == "Dragon Strike\nA spinning kick from above"
    assert post.like_count == 0


def test_blank_text_rejected(feed):
    with pytest.raises(InvalidInput):
        feed.create_post("Alice", "Title", "   ")
    assert feed.post_count() == 0


def test_newest_first_and_store_capped(feed):
    for i in range(7):
        feed.create_post("Alice", None, f"post {i}")
    assert feed.post_count() == 5
    assert [p.text for p in feed.list_posts(10)] == ["post 6", "post 5", "post 4", "post 3"]


def test_list_limits(feed):
    for i in range(5):
        feed.create_post("Alice", None, f"post {i}")
    assert len(feed.list_posts()) == 3
    assert len(feed.list_posts(1)) == 1
    with pytest.raises(InvalidInput):
        feed.list_posts(0)


def test_toggle_like(feed):
    post = feed.create_post("Alice", None, "Iron Wall")
    assert feed.toggle_like(post.id, "u1") == (post, True, 1)
    assert feed.toggle_like(post.id, "u2") == (post, True, 2)
    assert post.is_liked_by("u1")
    assert feed.toggle_like(post.id, "u1") == (post, False, 1)
    assert not post.is_liked_by("u1")


def test_concurrent_toggles_report_their_own_outcome(feed):
    post = feed.create_post("Alice", None, "Iron Wall")
    barrier = threading.Barrier(8)
    outcomes = []

    def toggle():
        barrier.wait()
        _, liked, like_count = feed.toggle_like(post.id, "u1")
        outcomes.append((liked, like_count))

    threads = [threading.Thread(target=toggle) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    # 同一個 caller 交替按讚 / 取消，每次回報的結果都要和自己那次操作一致
    assert sorted(outcomes) == [(False, 0)] * 4 + [(True, 1)] * 4
    assert post.like_count == 0

def test_toggle_like_errors(feed):
    post = feed.create_post("Alice", None, "Iron Wall")
    with pytest.raises(PostNotFound):
        feed.toggle_like("missing", "u1")
    with pytest.raises(InvalidInput):
        feed.toggle_like(post.id, " ")
