import argparse
import hashlib
import random
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional, Tuple


class LogGenerator:
    """Generates realistic RabbitMQ node logs for testing purposes."""

    def __init__(self, seed: Optional[int] = None):
        self.random = random.Random(seed)

        self.rabbitmq_versions = ["3.7.28", "3.8.9", "3.8.19"]
        self.erlang_versions = ["21.3", "22.3", "23.2"]

        self.normal_messages = [
            "accepting AMQP connection <0.{pid}.0> (10.0.0.{host}:5{port} -> 10.0.0.1:5672)",
            "connection <0.{pid}.0> (10.0.0.{host}:5{port} -> 10.0.0.1:5672): user 'guest' authenticated and granted access to vhost '/'",
            "closing AMQP connection <0.{pid}.0> (10.0.0.{host}:5{port} -> 10.0.0.1:5672)",
            "Mirrored queue 'orders' in vhost '/': Synchronising: 0 messages to synchronise",
            "Server startup complete; 3 plugins started.",
            "Statistics database started.",
        ]

        self.warning_messages = [
            "closing AMQP connection <0.{pid}.0> (10.0.0.{host}:5{port} -> 10.0.0.1:5672):\nclient unexpectedly closed TCP connection",
            "Mirrored queue 'orders' in vhost '/': Slave <rabbit@{peer}.{pid}.0> saw deaths of mirrors",
        ]

    def generate_timestamp(self, base_time: datetime, offset_seconds: float = 0) -> str:
        """Generate a header timestamp with millisecond precision."""
        timestamp = base_time + timedelta(seconds=offset_seconds)
        return timestamp.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]

    def header(self, timestamp: str, severity: str, message: str) -> str:
        pid = f"0.{self.random.randint(200, 9999)}.0"
        return f"{timestamp} [{severity}] <{pid}> {message}"

    def generate_startup(
        self, timestamp: str, node_name: str, version: str, erlang: str
    ) -> List[str]:
        """Startup banner as logged by a RabbitMQ 3.7/3.8 node."""
        cookie = hashlib.md5(b"cluster-cookie").hexdigest()[:22] + "=="
        home = "/var/lib/rabbitmq"
        return [
            self.header(timestamp, "info", ""),
            f" Starting RabbitMQ {version} on Erlang {erlang}",
            " Copyright (c) 2007-2020 VMware, Inc. or its affiliates.",
            " Licensed under the MPL 2.0. Website: https://rabbitmq.com",
            self.header(timestamp, "info", ""),
            f" node           : {node_name}",
            f" home dir       : {home}",
            " config file(s) : /etc/rabbitmq/rabbitmq.conf",
            f" cookie hash    : {cookie}",
            " log(s)         : /var/log/rabbitmq/rabbit.log",
            f" database dir   : {home}/mnesia/{node_name}",
        ]

    def generate_limits(self, timestamp: str) -> List[str]:
        memory = self.random.choice([3183, 6366, 12732])
        return [
            self.header(
                timestamp,
                "info",
                f"Memory high watermark set to {memory} MiB ({memory * 1048576} bytes) of {memory * 2} MiB total",
            ),
            self.header(timestamp, "info", "Enabling free disk space monitoring"),
            self.header(timestamp, "info", "Disk free limit set to 50MB"),
            self.header(
                timestamp,
                "info",
                "Limiting to approx 1048479 file handles (943629 sockets)",
            ),
            self.header(
                timestamp,
                "info",
                "Free disk space is sufficient. Free bytes: 10000000000. Limit: 50000000",
            ),
        ]

    def generate_routine(self, timestamp: str, peers: List[str]) -> str:
        if self.random.random() < 0.1:
            severity, template = "warning", self.random.choice(self.warning_messages)
        else:
            severity, template = "info", self.random.choice(self.normal_messages)

        message = template.format(
            pid=self.random.randint(200, 9999),
            host=self.random.randint(2, 250),
            port=self.random.randint(1000, 9999),
            peer=self.random.choice(peers) if peers else "localhost",
        )
        return self.header(timestamp, severity, message)

    def generate_incident(
        self, timestamp: str, node_name: str, peers: List[str]
    ) -> List[str]:
        """A resource alarm or peer loss, picked at random."""
        scenarios = [
            [
                self.header(
                    timestamp,
                    "info",
                    "Free disk space is insufficient. Free bytes: 40000000. Limit: 50000000",
                ),
                self.header(
                    timestamp,
                    "warning",
                    f"disk resource limit alarm set on node {node_name}.",
                ),
                "",
                "**********************************************************",
                "*** Publishers will be blocked until this alarm clears ***",
                "**********************************************************",
            ],
        ]
        if peers:
            scenarios.append(
                [
                    self.header(
                        timestamp,
                        "error",
                        f"** Node {self.random.choice(peers)} not responding **",
                    ),
                    "** Removing (timedout) connection **",
                    self.header(
                        timestamp,
                        "info",
                        f"node {self.random.choice(peers)} down: net_tick_timeout",
                    ),
                ]
            )
        return self.random.choice(scenarios)

    def generate_shutdown(self, timestamp: str) -> List[str]:
        if self.random.random() < 0.5:
            return [self.header(timestamp, "info", "RabbitMQ is asked to stop...")]
        return [self.header(timestamp, "info", "SIGTERM received - shutting down")]

    def generate_node_log(
        self,
        filename: str,
        node_name: str,
        peers: List[str],
        base_time: datetime,
        duration_minutes: int = 30,
        entries_per_minute: int = 20,
        include_incidents: bool = True,
    ) -> int:
        """Generate a complete node log file. Returns the number of lines."""
        version_index = self.random.randrange(len(self.rabbitmq_versions))
        version = self.rabbitmq_versions[version_index]
        erlang = self.erlang_versions[version_index]

        events: List[Tuple[float, List[str]]] = []
        start_offset = self.random.uniform(0, 5)

        started = self.generate_timestamp(base_time, start_offset)
        events.append(
            (start_offset, self.generate_startup(started, node_name, version, erlang))
        )
        limits = self.generate_timestamp(base_time, start_offset + 1)
        events.append((start_offset + 1, self.generate_limits(limits)))

        # Several entries may share a millisecond
        total_entries = duration_minutes * entries_per_minute
        for _ in range(total_entries):
            offset = round(self.random.uniform(start_offset + 2, duration_minutes * 60), 2)
            timestamp = self.generate_timestamp(base_time, offset)
            events.append((offset, [self.generate_routine(timestamp, peers)]))

        if include_incidents:
            offset = duration_minutes * 60 * self.random.uniform(0.4, 0.7)
            timestamp = self.generate_timestamp(base_time, offset)
            events.append((offset, self.generate_incident(timestamp, node_name, peers)))

        end_offset = duration_minutes * 60 + 1
        stopped = self.generate_timestamp(base_time, end_offset)
        events.append((end_offset, self.generate_shutdown(stopped)))

        events.sort(key=lambda event: event[0])

        lines = [line for _, block in events for line in block]
        with open(filename, "w") as f:
            for line in lines:
                f.write(line + "\n")

        return len(lines)

    def generate_cluster_logs(
        self,
        output_dir: str,
        num_nodes: int = 3,
        duration_minutes: int = 30,
        include_incidents: bool = True,
        base_time: Optional[datetime] = None,
    ) -> List[Path]:
        """Generate one log file per node of a cluster."""
        base_time = base_time or datetime.now().replace(microsecond=0) - timedelta(
            minutes=duration_minutes
        )
        output = Path(output_dir)
        output.mkdir(parents=True, exist_ok=True)

        node_names = [f"rabbit@node{i + 1}" for i in range(num_nodes)]
        files = []
        for node_name in node_names:
            filename = output / f"{node_name.replace('@', '_')}.log"
            peers = [peer for peer in node_names if peer != node_name]
            count = self.generate_node_log(
                str(filename),
                node_name,
                peers,
                base_time,
                duration_minutes=duration_minutes,
                include_incidents=include_incidents,
            )
            print(f"Generated node log: {filename} ({count} lines)")
            files.append(filename)

        return files


def main():
    """CLI interface for the log generator."""
    parser = argparse.ArgumentParser(description="Generate sample RabbitMQ cluster logs")
    parser.add_argument(
        "-o",
        "--output-dir",
        default="sample_logs",
        help="Output directory for log files",
    )
    parser.add_argument(
        "-n", "--nodes", type=int, default=3, help="Number of cluster nodes"
    )
    parser.add_argument(
        "-d", "--duration", type=int, default=30, help="Duration in minutes"
    )
    parser.add_argument("--seed", type=int, help="Random seed for reproducible logs")
    parser.add_argument(
        "--no-incidents", action="store_true", help="Do not add alarm/partition incidents"
    )

    args = parser.parse_args()

    generator = LogGenerator(seed=args.seed)

    print(f"Generating sample logs in directory: {args.output_dir}")
    files = generator.generate_cluster_logs(
        args.output_dir,
        num_nodes=args.nodes,
        duration_minutes=args.duration,
        include_incidents=not args.no_incidents,
    )

    print(f"\nSample logs generated successfully in {args.output_dir}/")
    print("You can now build a timeline from these files:")
    print(f"  rmqtimeline {' '.join(str(f) for f in files)} > timeline.html")
    return 0


if __name__ == "__main__":
    exit(main())
