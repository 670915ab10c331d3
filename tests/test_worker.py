"""Tests for the media worker entry point."""

from storymedia import worker


def test_build_worker_argv():
    assert worker.build_worker_argv(2, "media-generation", "INFO") == [
        "worker", "--concurrency=2", "--queues=media-generation", "--loglevel=INFO",
    ]


def test_parse_args_defaults():
    args = worker.parse_args([])
    assert args.verbose is False
    assert args.concurrency is None


def test_main_refuses_to_start_without_broker(monkeypatch):
    monkeypatch.setattr(worker, "connect_broker", lambda settings: None)
    assert worker.main([]) == 1


def test_main_starts_celery_worker(monkeypatch):
    from storymedia.tasks import celery_app

    class Client:
        closed = False

        def close(self):
            self.closed = True

    started = []
    monkeypatch.setattr(worker, "connect_broker", lambda settings: Client())
    monkeypatch.setattr(celery_app, "worker_main", lambda argv: started.append(argv))

    assert worker.main(["-c", "4"]) == 0
    assert started[0][:2] == ["worker", "--concurrency=4"]
    assert started[0][3] == "--loglevel=INFO"
