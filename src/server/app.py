from __future__ import annotations

import asyncio
import contextlib
import json
from dataclasses import asdict
from typing import List, Optional, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from elevator_bank import BankConfig, InvalidFloor, Simulation


class CallRequest(BaseModel):
    floor: int


class OutOfServiceRequest(BaseModel):
    reason: Optional[str] = None


class BankManager:
    def __init__(
        self,
        config: Optional[BankConfig] = None,
        tick_interval: float = 0.05,
        time_scale: float = 1.0,
    ) -> None:
        self.simulation = Simulation.from_config(config or BankConfig())
        self.simulation.events.on_any(self._collect_event)
        self.tick_interval = tick_interval
        self.time_scale = time_scale
        self.clients: Set[WebSocket] = set()
        self._events: List[dict] = []
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    async def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None

    async def _run(self) -> None:
        while True:
            async with self._lock:
                self.simulation.step(self.tick_interval * self.time_scale)
                payload = self.current_state()
                payload["events"] = self.drain_events()
            await self.broadcast(payload)
            await asyncio.sleep(self.tick_interval)

    async def broadcast(self, payload: dict) -> None:
        message = json.dumps(payload)
        disconnected: Set[WebSocket] = set()
        for client in set(self.clients):
            try:
                await client.send_text(message)
            except WebSocketDisconnect:
                disconnected.add(client)
        for client in disconnected:
            await self.unregister(client)

    async def register(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.clients.add(websocket)
        await websocket.send_text(json.dumps(self.current_state()))

    async def unregister(self, websocket: WebSocket) -> None:
        if websocket in self.clients:
            self.clients.remove(websocket)
        with contextlib.suppress(Exception):
            await websocket.close()

    def current_state(self) -> dict:
        return {
            "bank": self.simulation.snapshot(),
            "metrics": asdict(self.simulation.metrics_snapshot()),
            "time": self.simulation.current_time,
        }

    def drain_events(self) -> List[dict]:
        events, self._events = self._events, []
        return events

    async def register_call(self, floor: int) -> dict:
        async with self._lock:
            car = self.simulation.register_call(floor)
            state = self.current_state()
            state["assigned_car"] = car.car_id if car is not None else None
            return state

    async def mark_out_of_service(self, car_id: int, reason: Optional[str]) -> dict:
        async with self._lock:
            self.simulation.mark_out_of_service(car_id)
            state = self.current_state()
            state["car_id"] = car_id
            state["reason"] = reason
            return state

    def _collect_event(self, name: str, payload: object) -> None:
        self._events.append({"type": name, **asdict(payload)})


manager = BankManager()
app = FastAPI(title="Elevator Bank Simulation API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def on_startup() -> None:
    await manager.start()


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await manager.stop()


@app.get("/state")
async def get_state() -> dict:
    return manager.current_state()


@app.post("/calls")
async def register_call(request: CallRequest) -> dict:
    try:
        return await manager.register_call(request.floor)
    except InvalidFloor as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.post("/cars/{car_id}/out-of-service")
async def mark_out_of_service(car_id: int, request: Optional[OutOfServiceRequest] = None) -> dict:
    reason = request.reason if request else None
    try:
        return await manager.mark_out_of_service(car_id, reason)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown car {car_id}")


@app.websocket("/ws/stream")
async def websocket_endpoint(websocket: WebSocket) -> None:
    await manager.register(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await manager.unregister(websocket)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.app:app", host="0.0.0.0", port=8000, reload=False)
