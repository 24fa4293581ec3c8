"""
Tests for DeploymentMonitor wiring, shutdown and crash logging.
"""

import asyncio
import logging

from aiohttp import test_utils, web

from deploy_monitor.config import MonitorSettings
from deploy_monitor.orchestrator import DeploymentMonitor


def _settings(server: test_utils.TestServer, **kwargs) -> MonitorSettings:
    return MonitorSettings(
        project="my-app",
        token="secret-token",
        api_base=f"http://{server.host}:{server.port}",
        **kwargs,
    )


async def _start_server(fetches: list) -> test_utils.TestServer:
    async def handler(request: web.Request) -> web.Response:
        fetches.append(dict(request.query))
        return web.json_response({"deployments": [{"uid": "dpl_1", "state": "READY"}]})

    app = web.Application()
    app.router.add_get("/v6/deployments", handler)
    server = test_utils.TestServer(app)
    await server.start_server()
    return server


class TestRunAndStop:

    async def test_stop_after_first_render(self, renderer):
        fetches = []
        server = await _start_server(fetches)
        try:
            monitor = DeploymentMonitor(_settings(server, count=3), renderer=renderer)
            renderer.on_render = monitor.stop

            await asyncio.wait_for(monitor.run(), timeout=5)
        finally:
            await server.close()

        assert renderer.startups == [False]
        assert len(renderer.renders) == 1
        assert [d.id for d in renderer.renders[0][0]] == ["dpl_1"]
        assert fetches == [{"projectId": "my-app", "limit": "3"}]

    async def test_stop_from_outside_cancels_watcher(self, renderer):
        fetches = []
        server = await _start_server(fetches)
        try:
            monitor = DeploymentMonitor(_settings(server, interval_seconds=3600), renderer=renderer)
            run = asyncio.create_task(monitor.run())

            # first cycle done, watcher now sleeping for the interval
            while not renderer.renders:
                await asyncio.sleep(0.01)

            monitor.stop()
            await monitor.wait_stopped()
            await asyncio.wait_for(run, timeout=5)
        finally:
            await server.close()

        assert run.done() and not run.cancelled()
        assert len(fetches) == 1

    def test_stop_before_run_is_a_no_op(self, renderer):
        monitor = DeploymentMonitor(MonitorSettings(project="my-app", token="t"), renderer=renderer)
        monitor.stop()


class TestUnexpectedFailures:

    async def test_render_failure_keeps_monitor_polling(self, renderer, caplog):
        fetches = []
        server = await _start_server(fetches)
        attempts = 0

        def fail_then_stop():
            nonlocal attempts
            attempts += 1
            if attempts == 1:
                raise UnicodeEncodeError("ascii", "✓", 0, 1, "ordinal not in range(128)")
            monitor.stop()

        try:
            monitor = DeploymentMonitor(_settings(server, interval_seconds=1), renderer=renderer)
            renderer.on_render = fail_then_stop

            with caplog.at_level(logging.ERROR):
                await asyncio.wait_for(monitor.run(), timeout=10)
        finally:
            await server.close()

        assert len(fetches) == 2
        assert "Unexpected error in watcher for my-app" in caplog.text

    async def test_crashed_watcher_is_logged(self, renderer, caplog, monkeypatch):
        async def crash(self, max_cycles=None):
            raise RuntimeError("boom")

        monkeypatch.setattr("deploy_monitor.watcher.DeploymentWatcher.run_forever", crash)
        monitor = DeploymentMonitor(MonitorSettings(project="my-app", token="t"), renderer=renderer)

        with caplog.at_level(logging.ERROR, logger="deploy_monitor.orchestrator"):
            await asyncio.wait_for(monitor.run(), timeout=5)

        assert "Watcher for my-app stopped unexpectedly" in caplog.text
        assert "boom" in caplog.text
