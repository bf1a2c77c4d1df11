from loopr.core.identity import VideoIdentity


def test_local_paths_resolve_to_same_identity(tmp_path):
    (tmp_path / "videos").mkdir()
    a = VideoIdentity.from_location(tmp_path / "videos" / "a.mp4")
    b = VideoIdentity.from_location(str(tmp_path / "videos" / ".." / "videos" / "a.mp4"))
    assert a == b
    assert a.location.startswith("file://")
    assert len(a.key) == 64


def test_url_scheme_and_host_are_case_insensitive():
    a = VideoIdentity.from_location("HTTP://Media.Local/Videos/a.mp4")
    b = VideoIdentity.from_location("http://media.local/Videos/a.mp4")
    assert a.key == b.key


def test_keys_do_not_collide_on_punctuation():
    # "a/b" and "a_b" collapse under naive character replacement.
    a = VideoIdentity.from_location("http://host/a/b.mp4")
    b = VideoIdentity.from_location("http://host/a_b.mp4")
    assert a.key != b.key
