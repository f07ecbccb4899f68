import threading

from cybersec_monitor.utils.threading import start_background_task


class TestStartBackgroundTask:
    def test_runs_in_daemon_thread(self):
        results = {}
        done = threading.Event()
        main_thread_id = threading.current_thread().ident

        def task():
            results["thread_id"] = threading.current_thread().ident
            results["daemon"] = threading.current_thread().daemon
            done.set()

        thread = start_background_task(task, name="worker")
        assert done.wait(timeout=1)
        thread.join(timeout=1)

        assert thread.name == "worker"
        assert results["thread_id"] != main_thread_id
        assert results["daemon"] is True
