"""Test the sequential work queue"""

from mvfinder.collection.queue import WorkQueue


class TestWorkQueue:
    """Test WorkQueue"""

    def test_processes_in_order(self):
        seen = []
        queue = WorkQueue(lambda item: seen.append(item) or item * 2)
        queue.extend([1, 2, 3])

        results = queue.run()

        assert seen == [1, 2, 3]
        assert [r.value for r in results] == [2, 4, 6]
        assert all(r.ok for r in results)
        assert queue.pending == 0

    def test_errors_are_captured(self):
        def worker(item):
            if item == "bad":
                raise ValueError("bad item")
            return item

        queue = WorkQueue(worker)
        queue.extend(["a", "bad", "b"])

        results = queue.run()

        assert [r.ok for r in results] == [True, False, True]
        assert isinstance(results[1].error, ValueError)

    def test_delay_between_items_only(self):
        sleeps = []
        queue = WorkQueue(lambda item: item)
        queue.extend(range(3))

        queue.run(delay=0.25, sleep=sleeps.append)

        assert sleeps == [0.25, 0.25]

    def test_on_result_callback(self):
        received = []
        queue = WorkQueue(str)
        queue.extend([1, 2])

        queue.run(on_result=received.append)

        assert [r.value for r in received] == ["1", "2"]

    def test_cancel_leaves_remaining_items(self):
        queue = WorkQueue(lambda item: item)
        queue.extend([1, 2, 3])

        queue.run(on_result=lambda result: queue.cancel())

        assert queue.pending == 2

    def test_empty_queue(self):
        assert WorkQueue(lambda item: item).run() == []
