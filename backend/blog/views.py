# backend/blog/views.py
import logging

from django.db.models import Count, Q
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .constants import PostStatus
from .exceptions import BlogError, UploadError
from .images import attach_image, detach_image, remove_image_blob
from .lifecycle import create_post, get_post_for_edit, publish_post, save_post
from .models import Post
from .serializers import (
    DashboardPostSerializer,
    PostDetailSerializer,
    PostEditorSerializer,
    PostListSerializer,
    PostUpdateSerializer,
)
from .storages import get_blob_store
from .visibility import authored_posts, visible_posts

logger = logging.getLogger(__name__)


# ---------------------------
# Public reading: index + single post page
# ---------------------------
class PostViewSet(viewsets.ReadOnlyModelViewSet):
    """
    GET /api/blog/posts/          -> newest published posts (?author=<id>, ?search=<text>)
    GET /api/blog/posts/<slug>/   -> one post; drafts only for their author
    """
    permission_classes = [AllowAny]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['author']
    search_fields = ['title', 'excerpt', 'content']
    lookup_field = 'slug'

    def get_serializer_class(self):
        if self.action == 'list':
            return PostListSerializer
        return PostDetailSerializer

    def get_queryset(self):
        qs = Post.objects.with_author()
        if self.action == 'list':
            return qs.published().order_by('-published_at')
        # hidden drafts fall out of the queryset and surface as 404, not 403
        return visible_posts(self.request.user, qs)


# ---------------------------
# Dashboard: the author's own posts
# ---------------------------
class DashboardView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        qs = authored_posts(request.user).order_by('-updated_at')
        stats = qs.aggregate(
            total=Count('id'),
            published=Count('id', filter=Q(status=PostStatus.PUBLISHED)),
            drafts=Count('id', filter=Q(status=PostStatus.DRAFT)),
        )
        return Response({
            'stats': stats,
            'posts': DashboardPostSerializer(qs, many=True).data,
        })


# ---------------------------
# Editor: create / load / save / publish / featured image
# ---------------------------
class EditorViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]
    parser_classes = [JSONParser, FormParser, MultiPartParser]

    def create(self, request):
        post = create_post(request.user)
        return Response(PostEditorSerializer(post).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        post = get_post_for_edit(request.user, pk)
        return Response(PostEditorSerializer(post).data)

    def partial_update(self, request, pk=None):
        serializer = PostUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        fields, publish = serializer.split()
        post = save_post(request.user, pk, fields, publish=publish)
        return Response(PostEditorSerializer(post).data)

    @action(detail=True, methods=['post'])
    def publish(self, request, pk=None):
        serializer = PostUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        fields, _ = serializer.split()
        post = publish_post(request.user, pk, fields)
        return Response(PostEditorSerializer(post).data)

    @action(detail=True, methods=['post', 'delete'], parser_classes=[MultiPartParser, FormParser])
    def image(self, request, pk=None):
        store = get_blob_store()
        if request.method == 'DELETE':
            detach_image(request.user, pk, blob_store=store)
            post = get_post_for_edit(request.user, pk)
            return Response(PostEditorSerializer(post).data)

        upload = request.FILES.get('file')
        if upload is None:
            raise UploadError("file is required")

        previous = get_post_for_edit(request.user, pk).featured_image
        url = attach_image(request.user, pk, upload, blob_store=store)
        try:
            post = save_post(request.user, pk, {'featured_image': url})
        except BlogError:
            # the new blob is not referenced by anything; drop it before reporting
            try:
                remove_image_blob(request.user, url, blob_store=store)
            except BlogError as e:
                logger.warning("Could not remove orphaned image %s: %s", url, e)
            raise

        if previous and previous != url:
            try:
                remove_image_blob(request.user, previous, blob_store=store)
            except BlogError as e:
                logger.warning("Could not remove replaced image %s: %s", previous, e)
        return Response(PostEditorSerializer(post).data, status=status.HTTP_201_CREATED)
